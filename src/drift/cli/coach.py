#!/usr/bin/env python3
"""
Drift CLI - COACH

Internal Codename: COACH
Command-line front end for the training load engine.

Usage:
    drift schedule [--start DATE] [--days N] [--goal GOAL]
    drift plan --group GROUP --weekly-target VOLUME [--sessions N] [--mood MOOD]
    drift drift --planned VOLUME --actual VOLUME [--remaining N] [--base VOLUME]
    drift overload --current VOLUME --rpe RPE --week N --starting VOLUME
    drift onboard --bodyweight BW --experience LEVEL [--goal GOAL] [--days N]
"""

import logging
import os
import random
from datetime import date
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from drift.catalog import load_catalog
from drift.config import EngineConfig
from drift.engine import (
    ExerciseHistory,
    ExerciseSelector,
    WorkoutGenerator,
    generate_weekly_schedule,
)
from drift.engine.drift import calculate_drift, generate_drift_summary, validate_drift_redistribution
from drift.engine.periodization import (
    calculate_progression_metrics,
    generate_overload_summary,
    next_deload_week,
    validate_volume,
)
from drift.engine.schedule import calculate_session_volume
from drift.errors import DriftEngineError
from drift.models import CheckIn, ExperienceLevel, Goal, Mood, MuscleGroup
from drift.profile import onboard as onboard_user
from drift.profile import starting_working_weights

logger = logging.getLogger(__name__)

GOALS = [g.value for g in Goal]
GROUPS = [g.value for g in MuscleGroup]
LEVELS = [e.value for e in ExperienceLevel]
MOODS = [m.value for m in Mood]


def _parse_date(date_str: Optional[str]) -> date:
    if not date_str:
        return date.today()
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        raise click.BadParameter(f"Invalid date '{date_str}', expected YYYY-MM-DD")


def _fail(ctx: click.Context, message: str):
    click.echo(f"❌ {message}")
    ctx.exit(1)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help='Engine config YAML')
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Optional[str]):
    """
    Drift - Adaptive Training Load Engine

    Miss a set, not a week.
    """
    load_dotenv()
    level = 'DEBUG' if verbose else os.getenv('DRIFT_LOG_LEVEL', 'WARNING')
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        ctx.obj = EngineConfig.from_yaml(Path(config_path) if config_path else None)
    except DriftEngineError as e:
        _fail(ctx, f"Invalid config: {e}")


@cli.command()
@click.option('--start', 'start_str', type=str, help='Week start (YYYY-MM-DD), default: today')
@click.option('--days', default=4, type=int, help='Training days per week (3-7)')
@click.option('--goal', type=click.Choice(GOALS), default='hypertrophy', help='Training goal')
def schedule(start_str: Optional[str], days: int, goal: str):
    """Show the weekly training schedule."""
    week_start = _parse_date(start_str)
    week = generate_weekly_schedule(week_start, days, Goal(goal))

    click.echo("=" * 60)
    click.echo(f"WEEK OF {week_start.isoformat()} ({goal}, {days} days)")
    click.echo("=" * 60)

    for session in week.by_day():
        click.echo(f"{session.day_name}  {session.date.isoformat()}  {session.muscle_group.value.upper()}")

    click.echo(f"\n{'─' * 60}")
    counts = week.sessions_planned()
    click.echo("Sessions: " + ", ".join(f"{g.value} {counts[g]}" for g in MuscleGroup))


@cli.command()
@click.option('--group', type=click.Choice(GROUPS), required=True, help='Muscle group to train')
@click.option('--weekly-target', type=float, required=True, help='Weekly volume target for the group')
@click.option('--sessions', default=2, type=int, help='Sessions planned this week for the group')
@click.option('--drift', 'drift_addition', default=0.0, type=float, help='Drift owed to this session')
@click.option('--mood', type=click.Choice(MOODS), default='great', help='Pre-workout mood')
@click.option('--bad-sleep', is_flag=True, help='Slept poorly')
@click.option('--sore', is_flag=True, help='Still sore')
@click.option('--experience', type=click.Choice(LEVELS), default='beginner', help='Seeds working weights')
@click.option('--catalog', 'catalog_path', type=click.Path(exists=True, dir_okay=False), help='Exercise catalog YAML')
@click.option('--seed', type=int, help='Random seed for reproducible selection')
@click.pass_obj
def plan(config: EngineConfig, group: str, weekly_target: float, sessions: int, drift_addition: float,
         mood: str, bad_sleep: bool, sore: bool, experience: str, catalog_path: Optional[str],
         seed: Optional[int]):
    """Generate a session prescription."""
    ctx = click.get_current_context()

    try:
        catalog = load_catalog(Path(catalog_path) if catalog_path else None)
        selector = ExerciseSelector(rng=random.Random(seed), config=config)
        generator = WorkoutGenerator(selector=selector, config=config)
        check_in = CheckIn(mood=Mood(mood), good_sleep=not bad_sleep, not_sore=not sore)
        base = calculate_session_volume(weekly_target, sessions)

        session, _ = generator.generate_session(
            muscle_group=MuscleGroup(group),
            base_volume=base,
            catalog=catalog,
            working_weights=starting_working_weights(ExperienceLevel(experience)),
            history=ExerciseHistory(max_size=config.history_size),
            check_in=check_in,
            drift_addition=drift_addition,
        )
    except DriftEngineError as e:
        _fail(ctx, f"Error generating plan: {e}")
        return

    click.echo("=" * 60)
    click.echo(f"{group.upper()} SESSION - target {session.target_volume:,.0f} lbs")
    click.echo(f"Base {session.base_volume:,.0f} | readiness {mood} | drift +{session.drift_addition:,.0f}")
    click.echo("=" * 60)
    click.echo(f"\nSlot | Exercise                       | Sets x Reps @ Weight")
    click.echo("─" * 60)

    for workout_exercise in session.exercises:
        click.echo(
            f"{workout_exercise.slot.value:>4} | {workout_exercise.exercise.name:30} | "
            f"{workout_exercise.prescribed_sets} x {workout_exercise.prescribed_reps} "
            f"@ {workout_exercise.prescribed_weight:.0f}"
        )


@cli.command()
@click.option('--planned', type=float, required=True, help='Planned session volume')
@click.option('--actual', type=float, required=True, help='Completed session volume')
@click.option('--remaining', default=0, type=int, help='Sessions left this week')
@click.option('--base', type=float, help='Base volume per session (default: planned)')
@click.pass_obj
def drift(config: EngineConfig, planned: float, actual: float, remaining: int, base: Optional[float]):
    """Show how a missed session is redistributed."""
    base = planned if base is None else base
    amount = calculate_drift(planned, actual, config)
    summary = generate_drift_summary(amount, remaining, base, config)

    click.echo("=" * 60)
    click.echo(f"DRIFT: {actual:,.0f} / {planned:,.0f} lbs")
    click.echo("=" * 60)

    if amount == 0:
        click.secho("✓ No drift (target met or small miss forgiven)", fg='green')
        return

    click.echo(f"Drift: {summary.total_drift:,.0f} lbs")
    click.echo(f"Per session: +{summary.addition_per_session:,.0f} lbs "
               f"(+{summary.percentage_increase:.0f}%) over {summary.sessions_affected} session(s)")
    click.echo(f"Redistributed: {summary.redistributed:,.0f} lbs")
    click.echo(f"Forgiven: {summary.forgiven:,.0f} lbs")

    valid, reason = validate_drift_redistribution(base, summary.addition_per_session, config=config)
    if not valid:
        click.secho(f"⚠  {reason}", fg='yellow')


@cli.command()
@click.option('--current', type=float, required=True, help='Current weekly volume')
@click.option('--rpe', type=float, default=7.0, help='Average session RPE this week')
@click.option('--week', 'week_number', type=int, required=True, help='Current week number')
@click.option('--starting', type=float, required=True, help='Week 1 volume')
@click.pass_obj
def overload(config: EngineConfig, current: float, rpe: float, week_number: int, starting: float):
    """Show next week's volume target."""
    summary = generate_overload_summary(current, rpe, week_number, starting, config)
    metrics = calculate_progression_metrics(week_number, starting, current, config)

    click.echo("=" * 60)
    click.echo(f"WEEK {summary.current_week} -> WEEK {summary.next_week}")
    click.echo("=" * 60)
    click.echo(f"Volume: {summary.current_volume:,.0f} -> {summary.next_volume:,.0f} lbs "
               f"({summary.percentage_change:+.1f}%)")
    click.echo(f"Reason: {summary.reason}")
    click.echo(f"Next deload: week {next_deload_week(week_number, config)}")

    click.echo(f"\n{'─' * 60}")
    click.echo("PROGRESSION")
    click.echo('─' * 60)
    click.echo(f"Total increase: {metrics.total_increase:,.0f} lbs ({metrics.percentage_gain:+.1f}%)")
    click.echo(f"Deloads completed: {metrics.deloads_completed}")

    warning = validate_volume(summary.next_volume, starting)
    if warning:
        click.secho(f"⚠  {warning}", fg='yellow')


@cli.command()
@click.option('--bodyweight', type=float, required=True, help='Bodyweight')
@click.option('--experience', type=click.Choice(LEVELS), required=True, help='Experience level')
@click.option('--goal', type=click.Choice(GOALS), default='hypertrophy', help='Training goal')
@click.option('--days', default=4, type=int, help='Training days per week (3-7)')
@click.option('--date', 'date_str', type=str, help='Start date (YYYY-MM-DD), default: today')
@click.pass_obj
def onboard(config: EngineConfig, bodyweight: float, experience: str, goal: str, days: int,
            date_str: Optional[str]):
    """Create starting targets for a new user."""
    ctx = click.get_current_context()

    try:
        profile, week = onboard_user(
            bodyweight, ExperienceLevel(experience), days, Goal(goal), _parse_date(date_str), config
        )
    except DriftEngineError as e:
        _fail(ctx, f"Error: {e}")
        return

    click.echo("=" * 60)
    click.echo(f"WEEK {week.week_number} starting {week.week_start.isoformat()}")
    click.echo("=" * 60)

    for group in MuscleGroup:
        bucket = week.bucket(group)
        click.echo(f"{group.value:5} | {bucket.target_volume:>8,.0f} lbs | {bucket.sessions_planned} session(s)")

    click.echo(f"\n{'─' * 60}")
    click.echo("STARTING WEIGHTS")
    click.echo('─' * 60)
    for exercise_id, weight in profile.working_weights.items():
        click.echo(f"{exercise_id:22} {weight:>6.0f}")


if __name__ == '__main__':
    cli()
