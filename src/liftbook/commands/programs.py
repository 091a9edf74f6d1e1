"""Program management commands."""

import click

from ..models.program import Program
from ..services.programs import ProgramService
from .base import async_command, echo_status, format_table, require_database


@click.group()
@click.pass_context
def programs(ctx):
    """List, show and delete stored programs."""
    ctx.obj = ProgramService(require_database(ctx))


def _row(program: Program) -> list:
    name = program.name if len(program.name) <= 30 else program.name[:30] + "..."
    duration = (
        f"{program.duration} {program.duration_unit or 'days'}" if program.duration else "-"
    )
    return [
        program.id,
        program.user_id,
        name,
        program.days_per_week or "",
        duration,
        program.main_goal or "",
    ]


@programs.command(name="list")
@click.option("--user", "user_id", type=int, default=None, help="Only show this user's programs")
@click.pass_obj
@async_command
async def list_programs(service: ProgramService, user_id: int | None):
    """List stored programs."""
    if user_id is None:
        found = await service.list_all()
    else:
        found = await service.list_for_user(user_id)

    if not found:
        echo_status("info", "No programs found")
        return

    click.echo()
    headers = ["ID", "User", "Name", "Days", "Duration", "Goal"]
    click.echo(format_table(headers, [_row(p) for p in found]))
    click.echo()
    click.echo(f"Total: {len(found)} program(s)")


@programs.command()
@click.argument("program_id", type=int)
@click.pass_obj
@async_command
async def show(service: ProgramService, program_id: int):
    """Show a program with its workouts, exercises and sets."""
    program = await service.get(program_id)

    click.echo()
    click.echo(f"#{program.id} (user {program.user_id}, {program.total_sets} sets)")
    click.echo(program.get_summary())


@programs.command()
@click.argument("program_id", type=int)
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_obj
@async_command
async def delete(service: ProgramService, program_id: int, force: bool):
    """Delete a program with its workouts, exercises, sets and active-program entries."""
    program = await service.get(program_id)

    if not force and not click.confirm(f"Delete '{program.name}'?"):
        echo_status("info", "Cancelled")
        return

    await service.delete(program_id)
    echo_status("ok", f"Program {program_id} deleted")
