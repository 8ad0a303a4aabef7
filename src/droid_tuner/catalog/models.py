"""Model catalog value types."""

from dataclasses import dataclass, field

INHERIT = "inherit"

# Used when the companion CLI is missing or its help text yields nothing.
FALLBACK_MODELS = (
    "claude-opus-4-5-20251101",
    "claude-sonnet-4-5-20250929",
    "claude-opus-4-1-20250805",
    "claude-haiku-4-5-20251001",
    "gpt-5.1-codex-max",
    "gpt-5.1-codex",
    "gpt-5.1",
    "gemini-3-pro-preview",
    "glm-4.6",
)


@dataclass(frozen=True)
class ReasoningInfo:
    """Reasoning-effort support for one model.

    Attributes:
        supported: Level names in the order the CLI lists them.
        default: Level the CLI uses when none is configured.
    """

    supported: tuple[str, ...]
    default: str | None = None

    def ordered_levels(self) -> list[str]:
        """Return supported levels with the default first."""
        if self.default is None or self.default not in self.supported:
            return list(self.supported)
        return [self.default] + [lvl for lvl in self.supported if lvl != self.default]


@dataclass
class ModelCatalog:
    """Models a droid can be assigned.

    ``factory`` always starts with the ``inherit`` sentinel. ``byok`` holds
    user-configured custom models. ``reasoning`` maps model ids to their
    reasoning-effort support; models without an entry have none.
    """

    factory: list[str] = field(default_factory=lambda: [INHERIT, *FALLBACK_MODELS])
    byok: list[str] = field(default_factory=list)
    reasoning: dict[str, ReasoningInfo] = field(default_factory=dict)

    def all_models(self) -> list[str]:
        """Factory models followed by custom models, without duplicates."""
        seen: set[str] = set()
        result: list[str] = []
        for model in [*self.factory, *self.byok]:
            if model not in seen:
                seen.add(model)
                result.append(model)
        return result

    def reasoning_for(self, model: str) -> ReasoningInfo | None:
        """Look up reasoning support for a model id."""
        return self.reasoning.get(model)

    def supports_reasoning(self, model: str) -> bool:
        return model in self.reasoning
