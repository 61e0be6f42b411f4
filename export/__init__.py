"""Export-Modul: Terminal-Darstellung der Routine (Rich)."""

from export.tui_renderer import (
    print_class_schedule,
    print_duty_chart,
    print_substitution_plan,
    print_teacher_load,
    print_teacher_schedule,
    render_class_rows,
    render_teacher_rows,
)

__all__ = [
    "print_class_schedule",
    "print_teacher_schedule",
    "print_substitution_plan",
    "print_duty_chart",
    "print_teacher_load",
    "render_class_rows",
    "render_teacher_rows",
]
