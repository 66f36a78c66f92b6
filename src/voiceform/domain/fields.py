"""Field registry — spoken aliases, canonical ids, and navigation order.

One immutable registry is built at startup and shared by the classifier
and the form session. Resolution is exact-alias first, then substring
containment in table order.

Known limitation: the containment fallback picks the first alias in table
order, not the closest one. "annual" resolves through "annual income", but
"my income bracket" also resolves to ``annualIncome`` via "income".

INVARIANT: ``order`` values form a gap-free ``0..n-1`` sequence.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from pydantic import BaseModel, Field

from voiceform.domain.types import FieldKind


class FieldNotFound(LookupError):
    """A spoken phrase (or id) matches no registered field."""

    def __init__(self, phrase: str) -> None:
        super().__init__(f"Could not find a field matching {phrase!r}")
        self.phrase = phrase


class FieldDescriptor(BaseModel):
    """One form field: canonical id, spoken aliases, value kind, position."""

    model_config = {"frozen": True}

    id: str
    label: str
    kind: FieldKind = FieldKind.FREE_TEXT
    order: int
    aliases: tuple[str, ...] = Field(default_factory=tuple)


TAX_FORM_FIELDS: tuple[FieldDescriptor, ...] = (
    FieldDescriptor(
        id="fullName",
        label="full name",
        kind=FieldKind.FREE_TEXT,
        order=0,
        aliases=("name", "full name"),
    ),
    FieldDescriptor(
        id="email",
        label="email",
        kind=FieldKind.EMAIL,
        order=1,
        aliases=("email", "email address"),
    ),
    FieldDescriptor(
        id="ssn",
        label="social security number",
        kind=FieldKind.SSN,
        order=2,
        aliases=("ssn", "social", "social security", "social security number"),
    ),
    FieldDescriptor(
        id="dateOfBirth",
        label="date of birth",
        kind=FieldKind.DATE,
        order=3,
        aliases=("date of birth", "birth date", "birthday", "dob"),
    ),
    FieldDescriptor(
        id="annualIncome",
        label="annual income",
        kind=FieldKind.CURRENCY,
        order=4,
        aliases=("income", "annual income", "yearly income", "salary"),
    ),
    FieldDescriptor(
        id="occupation",
        label="occupation",
        kind=FieldKind.FREE_TEXT,
        order=5,
        aliases=("occupation", "job", "profession"),
    ),
    FieldDescriptor(
        id="filingStatus",
        label="filing status",
        kind=FieldKind.ENUMERATION,
        order=6,
        aliases=("filing status", "status", "tax status"),
    ),
    FieldDescriptor(
        id="dependents",
        label="dependents",
        kind=FieldKind.INTEGER_COUNT,
        order=7,
        aliases=("dependents", "number of dependents", "dependent count"),
    ),
)


def _clean_phrase(phrase: str) -> str:
    return " ".join(phrase.lower().split())


class FieldRegistry:
    """Immutable alias -> field id map plus the navigation order.

    Raises:
        ValueError: duplicate ids, an alias claimed by two fields, or an
            ``order`` sequence with gaps or repeats.
    """

    def __init__(self, descriptors: Iterable[FieldDescriptor]) -> None:
        ordered = sorted(descriptors, key=lambda d: d.order)
        if [d.order for d in ordered] != list(range(len(ordered))):
            msg = "Field order must be a gap-free 0..n-1 sequence"
            raise ValueError(msg)

        self._by_id: dict[str, FieldDescriptor] = {}
        for desc in ordered:
            if desc.id in self._by_id:
                msg = f"Duplicate field id: {desc.id}"
                raise ValueError(msg)
            self._by_id[desc.id] = desc

        # Alias table order: fields in navigation order, aliases as declared.
        self._aliases: dict[str, str] = {}
        for desc in ordered:
            for alias in desc.aliases:
                key = _clean_phrase(alias)
                owner = self._aliases.get(key)
                if owner is not None and owner != desc.id:
                    msg = f"Alias {key!r} claimed by both {owner} and {desc.id}"
                    raise ValueError(msg)
                self._aliases[key] = desc.id

        self._order: tuple[str, ...] = tuple(d.id for d in ordered)

    @classmethod
    def default(cls) -> FieldRegistry:
        """Registry for the built-in tax form."""
        return cls(TAX_FORM_FIELDS)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, phrase: str) -> str:
        """Resolve a spoken phrase to a field id.

        Raises:
            FieldNotFound: no alias matches exactly or by containment.
        """
        cleaned = _clean_phrase(phrase)
        if not cleaned:
            raise FieldNotFound(phrase)

        exact = self._aliases.get(cleaned)
        if exact is not None:
            return exact

        for alias, field_id in self._aliases.items():
            if alias in cleaned or cleaned in alias:
                return field_id

        raise FieldNotFound(phrase)

    def describe(self, field_id: str) -> FieldDescriptor:
        """Return the descriptor for *field_id*."""
        try:
            return self._by_id[field_id]
        except KeyError:
            raise FieldNotFound(field_id) from None

    def canonical_order(self) -> tuple[str, ...]:
        """Field ids in navigation order."""
        return self._order

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._by_id)

    @property
    def aliases(self) -> Mapping[str, str]:
        """Alias -> field id, in table order."""
        return dict(self._aliases)

    def with_aliases(self, extra: Mapping[str, Iterable[str]]) -> FieldRegistry:
        """Return a new registry with *extra* aliases appended per field id.

        Unknown field ids raise :class:`FieldNotFound`.
        """
        updated: list[FieldDescriptor] = []
        for field_id in extra:
            self.describe(field_id)
        for desc in self._by_id.values():
            additions = [_clean_phrase(a) for a in extra.get(desc.id, ())]
            merged = desc.aliases + tuple(
                a for a in dict.fromkeys(additions) if a and a not in desc.aliases
            )
            updated.append(desc.model_copy(update={"aliases": merged}))
        return FieldRegistry(updated)

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __contains__(self, field_id: object) -> bool:
        return field_id in self._by_id

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)
