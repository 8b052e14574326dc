"""
Diagram rendering through an external collaborator.

planviz never lays out diagrams itself. A DiagramRenderer turns Mermaid
source into a renderable artifact (SVG markup); render_diagram() awaits
it once and turns any failure into an inline error artifact instead of
raising.

The bundled MermaidCliRenderer shells out to the Mermaid CLI (`mmdc`,
from the @mermaid-js/mermaid-cli npm package).
"""

from __future__ import annotations

import asyncio
import html
import logging
import shutil
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from planviz.exceptions import RenderError
from planviz.graph.emitter import GraphDescription
from planviz.models import Theme

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_NAME = "redshift-explain-plan.svg"


@dataclass(frozen=True)
class RenderedDiagram:
    """
    Output of one render attempt.

    On failure `content` holds preformatted error text and `error` the
    message; it can be displayed but not exported.
    """

    content: str
    error: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def is_empty(self) -> bool:
        return not self.content

    @classmethod
    def failure(cls, message: str) -> "RenderedDiagram":
        return cls(
            content=f'<pre style="color:red;">{html.escape(message)}</pre>',
            error=message,
        )


class DiagramRenderer(ABC):
    """Abstract base for external diagram renderers."""

    @abstractmethod
    async def render(self, source: str) -> str:
        """
        Render Mermaid source to markup.

        Raises:
            RenderError: If the source cannot be rendered
        """
        ...


class MermaidCliRenderer(DiagramRenderer):
    """
    Renderer backed by the Mermaid CLI.

    Args:
        executable: Name or path of the `mmdc` binary
        theme: Mermaid theme ("dark" for Theme.DARK, "default" otherwise)
        timeout_seconds: Upper bound for one render call
    """

    def __init__(
        self,
        executable: str = "mmdc",
        theme: Theme = Theme.LIGHT,
        timeout_seconds: float = 30.0,
    ) -> None:
        self.executable = executable
        self.theme = theme
        self.timeout_seconds = timeout_seconds

    @property
    def mermaid_theme(self) -> str:
        return "dark" if self.theme == Theme.DARK else "default"

    async def render(self, source: str) -> str:
        executable = shutil.which(self.executable)
        if executable is None:
            raise RenderError(
                f"Mermaid CLI '{self.executable}' not found. "
                "Install it with: npm install -g @mermaid-js/mermaid-cli"
            )

        with tempfile.TemporaryDirectory(prefix="planviz-") as tmp:
            input_path = Path(tmp) / "diagram.mmd"
            output_path = Path(tmp) / "diagram.svg"
            input_path.write_text(source, encoding="utf-8")

            process = await asyncio.create_subprocess_exec(
                executable,
                "-i", str(input_path),
                "-o", str(output_path),
                "-t", self.mermaid_theme,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            try:
                _, stderr = await asyncio.wait_for(
                    process.communicate(), timeout=self.timeout_seconds
                )
            except asyncio.TimeoutError as e:
                process.kill()
                await process.wait()
                raise RenderError(
                    f"Mermaid CLI timed out after {self.timeout_seconds:g}s"
                ) from e

            if process.returncode != 0:
                message = stderr.decode("utf-8", errors="replace").strip()
                raise RenderError(message or f"Mermaid CLI exited with code {process.returncode}")

            if not output_path.exists():
                raise RenderError("Mermaid CLI produced no output")

            return output_path.read_text(encoding="utf-8")


async def render_diagram(
    graph: GraphDescription,
    renderer: DiagramRenderer,
) -> RenderedDiagram:
    """
    Render a graph description, never raising on renderer failure.

    An empty graph renders to an empty artifact without calling the
    renderer.
    """
    if graph.is_empty:
        return RenderedDiagram(content="")

    try:
        content = await renderer.render(graph.to_mermaid())
    except Exception as exc:
        logger.warning("Diagram render failed: %s", exc)
        return RenderedDiagram.failure(str(exc))

    return RenderedDiagram(content=content)


def export_artifact(diagram: RenderedDiagram, path: str | Path) -> Path:
    """
    Write the markup of a successful render verbatim.

    Raises:
        RenderError: If the diagram is empty, a failed render, or cannot be written
    """
    if diagram.is_error:
        raise RenderError(f"Cannot export a failed render: {diagram.error}")
    if diagram.is_empty:
        raise RenderError("Nothing to export: the diagram is empty")

    target = Path(path)
    try:
        target.write_text(diagram.content, encoding="utf-8")
    except OSError as e:
        raise RenderError(f"Cannot write {target}: {e}") from e
    logger.debug("Exported diagram to %s", target)
    return target
