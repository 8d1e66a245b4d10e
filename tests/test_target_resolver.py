import pytest

from biolens.core.contracts import Target, TargetType
from biolens.intent.target_resolver import TargetResolver, normalize_target, sanitize_target


def test_sanitize_residue_coerces_fields():
    t = sanitize_target({"type": "residue", "chain": "a", "resId": "57"})
    assert t == Target(type=TargetType.RESIDUE, chain="A", res_id=57)
    assert t.to_dict() == {"type": "residue", "chain": "A", "resId": 57}


@pytest.mark.parametrize("candidate", [
    {"type": "residue", "chain": "A"},
    {"type": "residue", "resId": "57.5"},
    {"type": "residue", "resId": "abc"},
    {"type": "range", "startResId": 1},
    {"type": "chain"},
    {"type": "chain", "chain": "   "},
    {"type": "ligand", "resName": "  "},
    {"type": "ligand"},
    {"type": "atom", "chain": "A"},
    {"chain": "A"},
    "residue",
    None,
])
def test_sanitize_rejects_incomplete(candidate):
    assert sanitize_target(candidate) is None


def test_inverted_range_is_kept():
    raw = {"type": "range", "chain": "A", "startResId": 50, "endResId": 10}
    assert sanitize_target(raw).to_dict() == raw


def test_sanitize_drops_fields_foreign_to_type():
    t = sanitize_target({"type": "protein", "chain": "b", "resId": 5, "color": "red"})
    assert t.to_dict() == {"type": "protein", "chain": "B"}


def test_sanitize_ligand_uppercases():
    assert sanitize_target({"type": "ligand", "resName": " atp "}).to_dict() == {
        "type": "ligand",
        "resName": "ATP",
    }


def test_sanitize_accepts_loose_type_spelling():
    assert sanitize_target({"type": " Chain ", "chain": "c"}).to_dict() == {"type": "chain", "chain": "C"}


@pytest.mark.parametrize("candidate", [
    {"type": "residue", "chain": "a", "resId": 57.0},
    {"type": "range", "startResId": "3", "endResId": 9},
    {"type": "chain", "chain": "b"},
    {"type": "ligand", "resName": "hem"},
    {"type": "all"},
    {"type": "polymer", "chain": "x"},
])
def test_sanitize_is_idempotent(candidate):
    once = sanitize_target(candidate)
    assert sanitize_target(once) == once
    assert sanitize_target(once.to_dict()) == once


def test_explicit_target_wins_over_flat_fields():
    t = normalize_target({"type": "chain", "chain": "b"}, {"resId": 5})
    assert t.to_dict() == {"type": "chain", "chain": "B"}


def test_invalid_explicit_target_is_not_repaired_from_flat_fields():
    assert normalize_target({"type": "residue"}, {"chain": "A", "resId": 5}) is None


def test_range_has_priority():
    t = normalize_target(None, {"chain": "a", "start": "10", "end": 20, "resId": 5})
    assert t.to_dict() == {"type": "range", "chain": "A", "startResId": 10, "endResId": 20}


def test_non_integral_range_falls_back_to_residue():
    t = normalize_target(None, {"start": "x", "end": 20, "residue_number": "5"})
    assert t.to_dict() == {"type": "residue", "resId": 5}


def test_chain_then_ligand():
    assert normalize_target(None, {"chainId": "c"}).to_dict() == {"type": "chain", "chain": "C"}
    assert normalize_target(None, {"ligand": "hem"}).to_dict() == {"type": "ligand", "resName": "HEM"}


def test_whole_scene_hints():
    assert normalize_target(None, {"all": True, "chain": "A"}).to_dict() == {"type": "all"}
    assert normalize_target("all", {"target": "all"}).to_dict() == {"type": "all"}
    assert normalize_target(None, {"global": "yes"}) is None


def test_prefixed_fields_for_paired_selectors():
    params = {"a_chain": "A", "a_resId": 10, "b_chainId": "b", "b_residue_number": "20"}
    assert normalize_target(None, params, "a").to_dict() == {"type": "residue", "chain": "A", "resId": 10}
    assert normalize_target(None, params, "b").to_dict() == {"type": "residue", "chain": "B", "resId": 20}


def test_prefix_falls_back_to_unprefixed_fields():
    t = normalize_target(None, {"chain": "A", "resId": 3}, "a")
    assert t.to_dict() == {"type": "residue", "chain": "A", "resId": 3}


def test_nothing_to_resolve():
    resolver = TargetResolver()
    assert resolver.resolve(None, {}) is None
    assert resolver.resolve(None, None) is None
    assert resolver.resolve(None, {"resId": "seven"}) is None
