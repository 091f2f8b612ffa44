"""NorthStar core library: goal hierarchy, periods, markdown codecs and reflections.

Public API re-exports for convenient imports:
    from northstar import current_period, read_goal, build_goal_tree, ...
"""

# Workspace & config
from northstar.workspace import (
    data_root,
    settings_path,
    get_user_timezone,
    now_local,
    today,
    goals_dir,
    reflections_dir,
    vision_dir,
    ensure_data_dirs,
)
from northstar.config import Config

# Document store
from northstar.documents import (
    Document,
    parse_document,
    render_document,
    resolve_document_path,
    read_document,
    write_document,
    list_documents,
    document_exists,
    delete_document,
)

# Periods
from northstar.periods import (
    current_period,
    period_for,
    periods_for_year,
    parent_period,
    child_periods,
    period_hierarchy,
    period_to_path,
    week_number,
    weeks_in_year,
    week_year,
    start_of_week,
    add_months,
    add_years,
    quarter_of,
    month_name,
    quarter_months,
)

# Task lists
from northstar.checkbox import (
    parse_tasks,
    update_task_in_content,
    calculate_progress,
    task_counts,
    extract_title,
    build_task_list,
    task_list_header,
)

# Focus content
from northstar.focus_content import (
    extract_emoji,
    parse_structured_content,
    build_structured_content,
    expectations_label,
)

# Goals
from northstar.goals import (
    read_goal,
    write_goal,
    goal_for_period,
    current_goals,
    goals_for_year,
    vision_for_year,
    toggle_task,
    save_goal_tasks,
    save_goal_structure,
    goal_frontmatter_for_period,
    goal_frontmatter_for_write,
    create_default_goal,
)

# Goal tree
from northstar.tree import build_goal_tree

# Reflections
from northstar.reflections import (
    ReflectionQuestion,
    reflection_questions,
    yearly_reflection_blocks,
    resolve_question_id,
    sections_by_key,
    build_content_from_sections,
    parse_reflection_sections,
    generate_reflection_title,
    reflection_path,
    create_default_reflection,
    read_reflection,
    write_reflection,
    all_reflections,
    reflections_for_year,
    recent_reflections,
    create_reflection,
    update_reflection_answers,
    find_linked_reflection,
)

# Models
from northstar.models import (
    PERIOD_TYPES,
    GOAL_STATUSES,
    Period,
    Task,
    FocusArea,
    StructuredContent,
    GoalFrontmatter,
    Goal,
    ReflectionFrontmatter,
    ReflectionSection,
    Reflection,
    GoalTreeNode,
)
