# Copyright 2025 Multikernel Technologies, Inc.
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


"""
Comparison report generation and formatting.
"""

import json
from typing import List, Dict, Any

import yaml

from .models import ComparisonResult


class ComparisonReporter:
    """Generates comparison reports in various formats."""

    def generate_report(self, result: ComparisonResult, verbose: bool = False, format: str = 'text') -> str:
        """Generate a comparison report in the specified format."""
        if format == 'json':
            return json.dumps(self.generate_json_report(result, verbose), indent=2)
        elif format == 'yaml':
            return self.generate_yaml_report(result, verbose)
        else:
            return self._generate_text_report(result, verbose)

    def _generate_text_report(self, result: ComparisonResult, verbose: bool = False) -> str:
        lines = []

        lines.append("DTS Comparison Report")
        lines.append("=" * 21)
        lines.append(f"Left:  {result.left_label}")
        lines.append(f"Right: {result.right_label}")
        lines.append("")

        lines.extend(self._format_options(result))
        lines.append("")

        if result.identical:
            lines.append("Status: ✓ IDENTICAL after filtering")
        else:
            lines.append("Status: ✗ DIFFERENT")
            lines.append(f"  {result.changed_lines} changed lines")

        if verbose:
            lines.append("")
            lines.append(f"  Left:  {len(result.left_text.splitlines())} lines after filtering")
            lines.append(f"  Right: {len(result.right_text.splitlines())} lines after filtering")

        if result.diff:
            lines.append("")
            lines.extend(result.diff)

        return "\n".join(lines)

    def _format_options(self, result: ComparisonResult) -> List[str]:
        lines = ["Filter Options:"]
        for name, enabled in result.options.to_dict().items():
            mark = "✓" if enabled else "-"
            lines.append(f"  {mark} {name.replace('_', '-')}")
        return lines

    def generate_json_report(self, result: ComparisonResult, verbose: bool = False) -> Dict[str, Any]:
        """Generate a report as a JSON-serializable dictionary."""
        report = {
            'left': result.left_label,
            'right': result.right_label,
            'identical': result.identical,
            'changed_lines': result.changed_lines,
            'options': result.options.to_dict(),
            'diff': list(result.diff),
        }
        if verbose:
            report['left_text'] = result.left_text
            report['right_text'] = result.right_text
        return report

    def generate_yaml_report(self, result: ComparisonResult, verbose: bool = False) -> str:
        """Generate a report in YAML format."""
        data = self.generate_json_report(result, verbose)
        return yaml.dump(data, default_flow_style=False, sort_keys=False)
