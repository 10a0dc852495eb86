"""Lazy access to the Container from click commands."""

from __future__ import annotations

import click

from shop.infrastructure.bootstrap import Container, build_container
from shop.infrastructure.config import get_settings


def get_container(ctx: click.Context) -> Container:
    """Return ``ctx.obj``, building it from the environment on first use.

    Tests pass a ready container via ``CliRunner.invoke(..., obj=container)``.
    """
    root = ctx.find_root()
    if root.obj is None:
        root.obj = build_container(get_settings())
    return root.obj
