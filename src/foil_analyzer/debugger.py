"""
Calculation Debugger
====================

Records the formula steps of an aerodynamic computation (inputs, formula,
result, unit) so a run can be checked by hand against the equations.

A debugger is passed explicitly to the functions that support it:

    from src.foil_analyzer import FoilAnalyzer, InputState
    from src.foil_analyzer.debugger import CalculationDebugger

    debugger = CalculationDebugger()
    FoilAnalyzer(debugger=debugger).compute_all(InputState())
    print(debugger.get_report())
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass
class TraceStep:
    """One recorded formula evaluation."""
    section: str
    description: str
    formula: str
    variables: Dict[str, Any]
    result: Any
    result_name: str
    result_unit: str = ""
    comment: str = ""


@dataclass
class CalculationDebugger:
    """
    Ordered trace of calculation steps grouped in sections.

    Attributes:
    ----------
    steps : list of TraceStep
        Recorded steps in evaluation order.

    metadata : dict
        Run description shown in the report header.
    """

    steps: List[TraceStep] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    current_section: str = "General"
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    def start(self, **metadata):
        """Clear the trace and begin a new run."""
        self.steps = []
        self.current_section = "General"
        self.metadata = dict(metadata)
        self.start_time = datetime.now()
        self.end_time = None

    def finish(self):
        self.end_time = datetime.now()

    def start_section(self, name: str):
        """Group subsequent steps under a section heading."""
        self.current_section = name

    def add_step(
        self,
        description: str,
        formula: str,
        variables: Dict[str, Any],
        result: Any,
        result_name: str,
        result_unit: str = "",
        comment: str = ""
    ):
        """Record one formula evaluation."""
        step = TraceStep(
            section=self.current_section,
            description=description,
            formula=formula,
            variables=dict(variables),
            result=result,
            result_name=result_name,
            result_unit=result_unit,
            comment=comment,
        )
        self.steps.append(step)
        logger.debug("%s: %s = %r %s", step.section, result_name, result, result_unit)

    def get_step_count(self) -> int:
        return len(self.steps)

    def find_steps_by_section(self, section: str) -> List[TraceStep]:
        return [s for s in self.steps if s.section == section]

    def find_step_by_result(self, result_name: str) -> Optional[TraceStep]:
        """Most recent step that produced a result name."""
        for step in reversed(self.steps):
            if step.result_name == result_name:
                return step
        return None

    def to_dataframe(self) -> pd.DataFrame:
        """Trace as a table with one row per step."""
        return pd.DataFrame([
            {
                "section": s.section,
                "description": s.description,
                "formula": s.formula,
                "result_name": s.result_name,
                "result": s.result,
                "unit": s.result_unit,
            }
            for s in self.steps
        ])

    def get_report(self) -> str:
        """
        Formatted text report of the trace.

        Returns:
        -------
        str
            Header with the run metadata, then one block per step.
        """
        lines = ["=" * 70, "FOIL CALCULATION TRACE", "=" * 70]
        if self.start_time:
            lines.append(f"Generated: {self.start_time.strftime('%Y-%m-%d %H:%M:%S')}")
        for key, value in self.metadata.items():
            lines.append(f"  {key}: {value}")
        lines.append("")

        section = None
        for number, step in enumerate(self.steps, start=1):
            if step.section != section:
                section = step.section
                lines.append(f"--- {section} ---")
                lines.append("")

            lines.append(f"[{number}] {step.description}")
            if step.variables:
                shown = ", ".join(
                    f"{k}={_format_value(v)}" for k, v in step.variables.items()
                )
                lines.append(f"    Inputs: {shown}")
            if step.formula:
                lines.append(f"    Formula: {step.formula}")
            lines.append(
                f"    => {step.result_name} = {_format_value(step.result)} {step.result_unit}".rstrip()
            )
            if step.comment:
                lines.append(f"    // {step.comment}")
            lines.append("")

        lines.append("=" * 70)
        lines.append(f"Total Steps: {len(self.steps)}")
        if self.start_time and self.end_time:
            elapsed = (self.end_time - self.start_time).total_seconds()
            lines.append(f"Elapsed Time: {elapsed:.3f} seconds")
        lines.append("=" * 70)
        return "\n".join(lines)


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.6g}"
    return str(value)
