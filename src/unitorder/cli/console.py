# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Shared Rich console for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

UNITORDER_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "unitorder": "bold magenta",
    "dim": "dim",
})

console = Console(theme=UNITORDER_THEME)


def print_banner() -> None:
    """Print the unitorder banner."""
    from unitorder import __version__

    console.print("[unitorder]unitorder[/unitorder]")
    console.print(f"  [dim]:: configuration unit ordering :: (v{__version__})[/dim]")
    console.print("  [dim]Copyright 2026 Firefly Software Solutions Inc. | Apache 2.0 License[/dim]\n")


def print_error(message: str) -> None:
    """Print an error block without interpreting markup in *message*."""
    console.print(message, style="error", markup=False, highlight=False, soft_wrap=True)
