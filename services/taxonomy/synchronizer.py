"""
Taxonomy Synchronizer - Keep the taxonomy aligned with the tool data.
Version: 1.0

Detects facet values used by tools but not declared in the taxonomy,
and builds an updated taxonomy that declares them. Never mutates input.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Sequence

from services.tool_contracts import Tool
from services.taxonomy_contracts import (
    DEFAULT_COLOR,
    ComplexityConfig,
    FunctionCategories,
    FunctionGroup,
    TaxonomyConfig,
    TaxonomyStructure,
    TierConfig,
    TypeConfig,
)

logger = logging.getLogger(__name__)


TYPE_ICONS = {
    "GPT": "🤖",
    "Platform": "🌐",
    "Tool": "🔧",
    "Doc": "📄",
    "Video": "🎥",
    "Bot": "🤖",
    "Script": "📜",
}

TYPE_COLORS = {
    "GPT": "#3B82F6",
    "Platform": "#10B981",
    "Tool": "#F59E0B",
    "Doc": "#6B7280",
    "Video": "#EF4444",
    "Bot": "#8B5CF6",
    "Script": "#059669",
}

TIER_COLORS = {
    "Foundation": "#10B981",
    "Specialist": "#F59E0B",
    "Restricted": "#DC2626",
}

# group key -> function name fragments that route into it
GROUP_KEYWORDS: Dict[str, List[str]] = {
    "content": ["Content & Creative", "Brand & Voice", "Content Creation"],
    "strategy": ["Strategy & Planning", "Audience Insights", "Research & Analysis"],
    "media": ["Media Relations", "Media List Creation"],
    "operations": ["AI Platforms", "Productivity Tools", "Collaboration"],
    "data": ["Data & Analytics", "Monitoring & Alerts"],
}

OTHER_GROUP_KEY = "other"


@dataclass
class ConsistencyReport:
    """Values present in the data but missing from the taxonomy."""
    undeclared_types: List[str] = field(default_factory=list)
    undeclared_tiers: List[str] = field(default_factory=list)
    undeclared_complexity: List[str] = field(default_factory=list)
    ungrouped_functions: List[str] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not (
            self.undeclared_types
            or self.undeclared_tiers
            or self.undeclared_complexity
            or self.ungrouped_functions
        )

    @property
    def issue_count(self) -> int:
        return (
            len(self.undeclared_types)
            + len(self.undeclared_tiers)
            + len(self.undeclared_complexity)
            + len(self.ungrouped_functions)
        )

    def to_dict(self) -> Dict[str, object]:
        return {
            "consistent": self.is_consistent,
            "issue_count": self.issue_count,
            "undeclared_types": self.undeclared_types,
            "undeclared_tiers": self.undeclared_tiers,
            "undeclared_complexity": self.undeclared_complexity,
            "ungrouped_functions": self.ungrouped_functions,
        }


def _missing(used: Sequence, declared: set) -> List[str]:
    return sorted({v for v in used if v and v not in declared})


def determine_group_for_function(function_name: str) -> str:
    lowered = function_name.lower()
    for group_key, fragments in GROUP_KEYWORDS.items():
        if any(fragment.lower() in lowered for fragment in fragments):
            return group_key
    return OTHER_GROUP_KEY


class TaxonomySynchronizer:
    """Compares one taxonomy against a tool collection."""

    def __init__(self, config: TaxonomyConfig):
        self.config = config

    def find_inconsistencies(self, tools: Sequence[Tool]) -> ConsistencyReport:
        structure = self.config.structure
        grouped = {
            func
            for group in self.config.function_categories.groups.values()
            for func in group.functions
        }

        return ConsistencyReport(
            undeclared_types=_missing([t.type for t in tools], {t.id for t in structure.types}),
            undeclared_tiers=_missing([t.tier for t in tools], {t.id for t in structure.tiers}),
            undeclared_complexity=_missing([t.complexity for t in tools], {c.id for c in structure.complexity}),
            ungrouped_functions=_missing([t.function for t in tools], grouped),
        )

    def synchronize(self, tools: Sequence[Tool]) -> TaxonomyConfig:
        """
        Return a new taxonomy declaring every value used by tools.

        Undeclared functions go to the keyword-matched group when that
        group exists, else to the 'other' group.
        """
        report = self.find_inconsistencies(tools)
        if report.is_consistent:
            return self.config

        structure = self.config.structure
        types = list(structure.types) + [
            TypeConfig(
                id=value,
                label=value,
                icon=TYPE_ICONS.get(value, "🔧"),
                color=TYPE_COLORS.get(value, DEFAULT_COLOR)
            )
            for value in report.undeclared_types
        ]
        tiers = list(structure.tiers) + [
            TierConfig(
                id=value,
                label=value,
                color=TIER_COLORS.get(value, DEFAULT_COLOR),
                description=f"{value} access level"
            )
            for value in report.undeclared_tiers
        ]
        complexity = list(structure.complexity) + [
            ComplexityConfig(id=value, label=value, color=DEFAULT_COLOR)
            for value in report.undeclared_complexity
        ]

        # Work on plain lists, rebuild the frozen models at the end
        group_functions: Dict[str, List[str]] = {
            key: list(group.functions)
            for key, group in self.config.function_categories.groups.items()
        }
        for function_name in report.ungrouped_functions:
            key = determine_group_for_function(function_name)
            if key not in group_functions:
                key = OTHER_GROUP_KEY
            group_functions.setdefault(key, []).append(function_name)

        existing = self.config.function_categories.groups
        groups = {
            key: (
                existing[key].model_copy(update={"functions": functions})
                if key in existing
                else FunctionGroup(name="Other", icon="🔧", color=DEFAULT_COLOR, functions=functions)
            )
            for key, functions in group_functions.items()
        }

        logger.info(f"Taxonomy synchronized: {report.issue_count} value(s) declared")

        return self.config.model_copy(update={
            "last_updated": datetime.now(timezone.utc).isoformat(),
            "structure": TaxonomyStructure(types=types, tiers=tiers, complexity=complexity),
            "function_categories": FunctionCategories(groups=groups),
        })
