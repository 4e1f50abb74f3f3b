"""
Report Renderers

Turns lint results into console text, a JSON document, or a GitHub
pull-request comment body.
"""

import json
from typing import List, Sequence

from clilint.linter import LintResult, has_lint_errors


COMMENT_TITLE = "CTF Challenges YAML Linting Results"

NO_CHANGES_COMMENT = (
    f"## 📋 {COMMENT_TITLE}\n\n"
    "🔍 No challenge.yml files were affected by this PR.\n\n"
    "No linting required for this change."
)


def format_console(results: Sequence[LintResult]) -> str:
    """
    Format results for terminal output.

    Example:
        ❌ web/chall1/challenge.yml:
          - Field 'state' should be 'visible'
          ⚠️ Field 'type' is 'standard', did you intend to use 'dynamic'?

        ✅ web/chall2/challenge.yml: OK
        All challenge.yml files passed linting! 🎉
    """
    lines: List[str] = []

    for result in results:
        if result.errors:
            lines.append(f"❌ {result.file}:")
            for error in result.errors:
                lines.append(f"  - {error}")
            for warning in result.warnings:
                lines.append(f"  ⚠️ {warning}")
            lines.append("")
        elif result.warnings:
            lines.append(f"⚠️ {result.file}: OK with warnings")
            for warning in result.warnings:
                lines.append(f"  ⚠️ {warning}")
        else:
            lines.append(f"✅ {result.file}: OK")

    if not has_lint_errors(results):
        lines.append("All challenge.yml files passed linting! 🎉")

    return "\n".join(lines)


def results_to_json(results: Sequence[LintResult]) -> str:
    output = {
        "success": not has_lint_errors(results),
        "results": [result.to_dict() for result in results],
    }
    return json.dumps(output, ensure_ascii=False)


def _comment_block(result: LintResult) -> List[str]:
    parts = []

    if result.errors:
        parts.append(f"#### ❌ **{result.name}** (`{result.file}`)\n\n")
        if result.description:
            parts.append("**Description:**\n")
            parts.append(result.description)
            parts.append("\n\n")
        parts.append("**Issues found:**\n")
        for error in result.errors:
            parts.append(f"- {error}\n")
        if result.warnings:
            parts.append("\n**Warnings:**\n")
            for warning in result.warnings:
                parts.append(f"- ⚠️ {warning}\n")
        parts.append("\n---\n\n")
        return parts

    parts.append(f"#### 🚩 **{result.name}** (`{result.file}`)\n\n")
    if result.description:
        parts.append(result.description)
        parts.append("\n\n")
    if result.warnings:
        parts.append("**Warnings:**\n")
        for warning in result.warnings:
            parts.append(f"- ⚠️ {warning}\n")
        parts.append("\n")
    if result.description or result.warnings:
        parts.append("---\n\n")
    return parts


def generate_comment_body(results: Sequence[LintResult]) -> str:
    """
    Render the pull-request comment for a set of results.

    Args:
        results: Results for the challenges touched by the pull request

    Returns:
        GitHub-flavored markdown comment body
    """
    has_errors = has_lint_errors(results)
    parts = []

    if has_errors:
        parts.append(f"## ❌ {COMMENT_TITLE}\n\n")
        parts.append("### 🔍 Linting Results for Changes in This PR:\n\n")
    else:
        parts.append(f"## 🎉 {COMMENT_TITLE}\n\n")
        parts.append("✅ All affected challenge.yml files passed linting!\n\n")
        parts.append("### 📋 Checked Challenges in This PR:\n\n")

    for result in results:
        parts.extend(_comment_block(result))

    if has_errors:
        parts.append("⚠️ Please fix the issues above and try again.")
    else:
        parts.append(
            "✨ Great job! All challenge.yml files in the changed directories "
            "follow the required format and standards."
        )

    return "".join(parts)
