"""
Target Resolution System.

Resolves the "what" of a command into a Target selector using:
- An explicit target object from the model, re-validated field by field
- Flat parameter fields (chain, resId, start/end, resName, ...)
- Prefixed fields for paired selectors (a_chain, b_resId, ...)
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional

from loguru import logger

from biolens.core.contracts import Target, TargetType, TARGET_TYPES
from biolens.intent.coercion import normalize_chain, to_integer, to_text
from biolens.intent.vocabulary import WHOLE_SCENE_FLAGS


class TargetResolver:
    """
    Resolves model-provided selector fragments into Target objects.

    Guarantees:
    - A returned Target always satisfies the field requirements of its type
    - Missing or malformed information yields None, never a guessed Target
    - Range order is not checked; empty selections are the renderer's concern
    """

    def resolve(
        self,
        candidate: Any,
        params: Optional[Mapping[str, Any]] = None,
        prefix: str = "",
    ) -> Optional[Target]:
        """
        Resolve a Target from an explicit candidate or from flat fields.

        Args:
            candidate: Value found at ``params.target`` (or ``params.a``/``b``)
            params: Flat parameter bag to synthesize from
            prefix: Field prefix for paired selectors, e.g. "a" -> "a_chain"

        Returns:
            Target, or None when nothing consistent can be assembled
        """
        if isinstance(candidate, Target):
            return self.sanitize(candidate)
        if isinstance(candidate, Mapping) and isinstance(candidate.get("type"), str):
            return self.sanitize(candidate)

        bag: Mapping[str, Any] = params if isinstance(params, Mapping) else {}
        pfx = f"{prefix}_" if prefix else ""

        if self._wants_whole_scene(bag):
            return Target(type=TargetType.ALL)

        chain = self._first_chain(bag, (f"{pfx}chain", f"{pfx}chainId", "chain", "chainId"))
        res_id_raw = self._first_present(bag, (f"{pfx}resId", f"{pfx}residue_number", "resId", "residue_number"))
        start_raw = self._first_present(bag, (f"{pfx}startResId", f"{pfx}start", "startResId", "start"))
        end_raw = self._first_present(bag, (f"{pfx}endResId", f"{pfx}end", "endResId", "end"))
        res_name_raw = self._first_present(bag, (f"{pfx}resName", f"{pfx}ligand", "resName", "ligand"))

        # Priority: range > residue > chain > ligand
        if start_raw is not None and end_raw is not None:
            start, end = to_integer(start_raw), to_integer(end_raw)
            if start is not None and end is not None:
                return self.sanitize({
                    "type": "range", "chain": chain, "startResId": start, "endResId": end,
                })

        if res_id_raw is not None:
            res_id = to_integer(res_id_raw)
            if res_id is not None:
                return self.sanitize({"type": "residue", "chain": chain, "resId": res_id})

        if chain:
            return self.sanitize({"type": "chain", "chain": chain})

        if res_name_raw is not None:
            res_name = to_text(res_name_raw).strip().upper()
            if res_name:
                return self.sanitize({"type": "ligand", "resName": res_name})

        logger.debug(f"No target could be resolved (prefix={prefix!r})")
        return None

    def sanitize(self, candidate: Any) -> Optional[Target]:
        """
        Re-validate a typed selector against its per-type requirements.

        Unknown fields are dropped; a selector missing a required field is
        rejected as a whole.
        """
        if isinstance(candidate, Target):
            candidate = candidate.to_dict()
        if not isinstance(candidate, Mapping) or not isinstance(candidate.get("type"), str):
            return None

        type_name = candidate["type"].strip().lower()
        if type_name not in TARGET_TYPES:
            logger.debug(f"Rejected target with unknown type {candidate['type']!r}")
            return None
        target_type = TargetType(type_name)

        fields: Dict[str, Any] = {}
        chain = normalize_chain(candidate.get("chain"))
        if chain:
            fields["chain"] = chain

        if target_type is TargetType.RESIDUE:
            res_id = to_integer(candidate.get("resId"))
            if res_id is None:
                logger.debug("Rejected residue target without integer resId")
                return None
            fields["res_id"] = res_id

        elif target_type is TargetType.RANGE:
            start = to_integer(candidate.get("startResId"))
            end = to_integer(candidate.get("endResId"))
            if start is None or end is None:
                logger.debug("Rejected range target without integer bounds")
                return None
            fields["start_res_id"] = start
            fields["end_res_id"] = end

        elif target_type is TargetType.CHAIN:
            if not chain:
                logger.debug("Rejected chain target without chain id")
                return None

        elif target_type is TargetType.LIGAND:
            raw = candidate.get("resName")
            res_name = to_text(raw).strip().upper() if raw else ""
            if not res_name:
                logger.debug("Rejected ligand target without resName")
                return None
            fields["res_name"] = res_name

        return Target(type=target_type, **fields)

    def _wants_whole_scene(self, bag: Mapping[str, Any]) -> bool:
        """Explicit whole-scene hints: global/all/whole/entire = true, or target "all"."""
        if any(bag.get(flag) is True for flag in WHOLE_SCENE_FLAGS):
            return True
        target = bag.get("target")
        return isinstance(target, str) and target.strip().lower() == "all"

    @staticmethod
    def _first_present(bag: Mapping[str, Any], keys: Iterable[str]) -> Any:
        for key in keys:
            value = bag.get(key)
            if value is not None:
                return value
        return None

    @staticmethod
    def _first_chain(bag: Mapping[str, Any], keys: Iterable[str]) -> Optional[str]:
        for key in keys:
            chain = normalize_chain(bag.get(key))
            if chain:
                return chain
        return None


_default_resolver = TargetResolver()


def normalize_target(
    candidate: Any,
    params: Optional[Mapping[str, Any]] = None,
    prefix: str = "",
) -> Optional[Target]:
    """Module-level shortcut for :meth:`TargetResolver.resolve`."""
    return _default_resolver.resolve(candidate, params, prefix)


def sanitize_target(candidate: Any) -> Optional[Target]:
    """Module-level shortcut for :meth:`TargetResolver.sanitize`."""
    return _default_resolver.sanitize(candidate)
