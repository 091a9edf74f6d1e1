"""Progress commands."""

import click

from ..services.workout_log import WorkoutLogService
from .base import async_command, echo_status, format_table, require_database


@click.group()
@click.pass_context
def progress(ctx):
    """Show logged workouts and personal records."""
    ctx.obj = WorkoutLogService(require_database(ctx))


@progress.command()
@click.argument("user_id", type=int)
@click.pass_obj
@async_command
async def summary(service: WorkoutLogService, user_id: int):
    """Workouts this month and this week."""
    result = await service.summary(user_id)

    click.echo()
    click.echo(f"This month: {result.monthly_count} workout(s)")
    click.echo(f"This week:  {result.weekly_count} workout(s)")
    rows = [[day["day_name"], day["minutes"]] for day in result.to_dict()["weekly_workouts"]]
    click.echo()
    click.echo(format_table(["Day", "Minutes"], rows))


@progress.command()
@click.argument("user_id", type=int)
@click.pass_obj
@async_command
async def records(service: WorkoutLogService, user_id: int):
    """Personal records set this month."""
    found = await service.records(user_id)
    if not found:
        echo_status("info", "No records this month")
        return

    rows = [
        [r.name, f"{r.weight:g} x {r.reps}", f"{r.estimated_1rm:g}", r.date.isoformat()]
        for r in found
    ]
    click.echo()
    click.echo(format_table(["Exercise", "Best set", "Est. 1RM", "Date"], rows))
