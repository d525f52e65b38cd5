from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from jinja2 import Environment, select_autoescape

from .types_report import ShadingReport


env = Environment(autoescape=select_autoescape(["html", "xml"]))


def _accepted_rows(report: ShadingReport) -> Iterable[dict]:
    for module in report.accepted:
        yield {
            "module": str(module.id),
            "version": module.version or "unversioned",
            "artifacts": list(module.artifacts),
        }


def _rejected_rows(report: ShadingReport) -> Iterable[dict]:
    for module in report.rejected:
        yield {
            "module": str(module.id),
            "version": module.version or "unversioned",
            "rule": report.rejection_reason(module),
        }


def render_json(report: ShadingReport) -> str:
    payload = {
        "generated_at": report.generated_at.isoformat(),
        "accepted": list(_accepted_rows(report)),
        "rejected": list(_rejected_rows(report)),
    }
    if report.plan is not None:
        payload["relocation"] = report.plan.as_dict()
    return json.dumps(payload, indent=2)


def render_markdown(report: ShadingReport) -> str:
    lines = [
        "# Shading Report",
        "",
        f"Generated at: {report.generated_at.isoformat()}",
        f"Accepted modules: {len(report.accepted)}",
        f"Rejected modules: {len(report.rejected)}",
    ]

    lines.append("\n## Accepted\n")
    lines.append("| Module | Version | Artifacts |")
    lines.append("| --- | --- | --- |")
    for row in _accepted_rows(report):
        artifacts = ", ".join(Path(a).name for a in row["artifacts"]) or "None"
        lines.append(f"| {row['module']} | {row['version']} | {artifacts} |")

    lines.append("\n## Rejected\n")
    lines.append("| Module | Version | Banned by |")
    lines.append("| --- | --- | --- |")
    for row in _rejected_rows(report):
        lines.append(f"| {row['module']} | {row['version']} | {row['rule']} |")

    if report.plan is not None:
        plan = report.plan
        lines.append("\n## Relocation\n")
        lines.append(f"Prefix: `{plan.prefix}`")
        lines.append(f"Multi-Release manifest attribute: {'yes' if plan.needs_manifest_attribute else 'no'}")
        lines.append("")
        lines.append("| Entry | Relocated to |")
        lines.append("| --- | --- |")
        for source, target in plan.mapping().items():
            lines.append(f"| {source} | {target} |")
    return "\n".join(lines)


def render_html(report: ShadingReport) -> str:
    template = env.from_string(
        """
<!doctype html>
<html lang=\"en\">
<head>
  <meta charset=\"utf-8\" />
  <title>Shading Report</title>
  <style>
    body { font-family: Arial, sans-serif; margin: 2rem; }
    h1, h2 { color: #1f2937; }
    table { border-collapse: collapse; width: 100%; margin-bottom: 1.5rem; }
    th, td { border: 1px solid #d1d5db; padding: 0.5rem; }
    th { background: #f3f4f6; text-align: left; }
    code { background: #f3f4f6; padding: 0.1rem 0.3rem; }
  </style>
</head>
<body>
  <h1>Shading Report</h1>
  <p>Generated at: {{ generated_at }}</p>
  <section>
    <h2>Accepted ({{ accepted|length }})</h2>
    <table>
      <thead><tr><th>Module</th><th>Version</th><th>Artifacts</th></tr></thead>
      <tbody>
        {% for row in accepted %}
        <tr><td>{{ row.module }}</td><td>{{ row.version }}</td><td>{{ row.artifacts|join(", ") }}</td></tr>
        {% endfor %}
      </tbody>
    </table>
  </section>
  <section>
    <h2>Rejected ({{ rejected|length }})</h2>
    <table>
      <thead><tr><th>Module</th><th>Version</th><th>Banned by</th></tr></thead>
      <tbody>
        {% for row in rejected %}
        <tr><td>{{ row.module }}</td><td>{{ row.version }}</td><td>{{ row.rule }}</td></tr>
        {% endfor %}
      </tbody>
    </table>
  </section>
  {% if relocation %}
  <section>
    <h2>Relocation</h2>
    <p>Prefix: <code>{{ relocation.prefix }}</code></p>
    {% if relocation.needs_manifest_attribute %}<p>Multi-Release manifest attribute required.</p>{% endif %}
    <table>
      <thead><tr><th>Entry</th><th>Relocated to</th></tr></thead>
      <tbody>
        {% for source, target in relocation.relocations.items() %}
        <tr><td>{{ source }}</td><td>{{ target }}</td></tr>
        {% endfor %}
      </tbody>
    </table>
  </section>
  {% endif %}
</body>
</html>
"""
    )
    return template.render(
        generated_at=report.generated_at.isoformat(),
        accepted=list(_accepted_rows(report)),
        rejected=list(_rejected_rows(report)),
        relocation=report.plan.as_dict() if report.plan is not None else None,
    )


def render_report(report: ShadingReport, fmt: str) -> str:
    fmt = fmt.lower()
    if fmt == "json":
        return render_json(report)
    if fmt in {"md", "markdown"}:
        return render_markdown(report)
    if fmt == "html":
        return render_html(report)
    raise ValueError(f"Unknown report format: {fmt}")


def write_report(report: ShadingReport, fmt: str, destination: Path | None) -> str:
    output = render_report(report, fmt)
    if destination:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(output)
    return output
