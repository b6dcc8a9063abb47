"""Output writing for cleaned notebooks and check reports."""

import json
import sys
from pathlib import Path
from typing import Literal, Mapping, Sequence

from nbscrub import NotebookWriteError
from nbscrub.models import CheckResult, Notebook


class NotebookWriter:
    """Serialize notebooks the way Jupyter does.

    One space of indentation per level, non-ASCII characters written as is,
    and a trailing newline. Known keys come out in nbformat's canonical
    (alphabetical) order, followed by any unknown keys in parsed order.
    """

    def dumps(self, nb: Notebook) -> str:
        """Serialize a notebook to a string.

        Args:
            nb: Notebook to serialize

        Returns:
            str: Notebook JSON text
        """
        return json.dumps(nb.model_dump(), indent=1, ensure_ascii=False) + "\n"

    def write(self, nb: Notebook, output_path: Path | str) -> Path:
        """Write a notebook to a file.

        Args:
            nb: Notebook to write
            output_path: Path to output file

        Returns:
            Path: Path to written file

        Raises:
            NotebookWriteError: If the file cannot be written
        """
        output_path = Path(output_path)
        text = self.dumps(nb)

        try:
            with open(output_path, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
        except OSError as e:
            raise NotebookWriteError(f"Failed to write notebook {output_path}: {e}") from e

        return output_path

    def write_stdout(self, nb: Notebook) -> None:
        sys.stdout.write(self.dumps(nb))


class ReportWriter:
    """Render check findings as text lines or JSON.

    Supports text and json output formats.
    """

    def render(
        self,
        results: Mapping[str, Sequence[CheckResult]],
        format: Literal["text", "json"] = "text",
    ) -> str:
        """Render findings grouped by notebook path.

        Args:
            results: Findings keyed by notebook path, in display order
            format: Output format (text or json)

        Returns:
            str: Rendered report, empty when there are no findings
        """
        if format == "json":
            return self.render_json(results)
        elif format == "text":
            return self.render_text(results)
        else:
            raise ValueError(f"Unsupported format: {format}")

    def render_text(self, results: Mapping[str, Sequence[CheckResult]]) -> str:
        lines = []
        for path, findings in results.items():
            for finding in findings:
                lines.append(f"{path}:{finding}")
        return "\n".join(lines)

    def render_json(self, results: Mapping[str, Sequence[CheckResult]]) -> str:
        """Render findings as a JSON array of objects.

        Each object carries the notebook path, the finding kind, and, where
        they apply, the cell number and the metadata key.
        """
        entries = []
        for path, findings in results.items():
            for finding in findings:
                entry = {"path": path}
                entry.update(finding.model_dump(mode="json", exclude_none=True))
                entries.append(entry)
        return json.dumps(entries, indent=2, ensure_ascii=False)
