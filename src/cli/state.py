"""Per-invocation CLI state shared between the root callback and subcommands."""

from __future__ import annotations

from dataclasses import dataclass

import typer

from core.config import AppSettings


@dataclass
class CLIState:
    settings: AppSettings


def get_settings(ctx: typer.Context) -> AppSettings:
    """Settings resolved by the root callback (plain env settings when run standalone)."""

    state = ctx.find_object(CLIState)
    if state is None:
        return AppSettings()
    return state.settings
