"""Tests for reconstructing Rust type syntax."""

from rustdoc_md.type_formatting import (
    format_bounds,
    format_generics,
    format_type,
    format_where_clause,
    principal_path_id,
)


def _trait_bound(path: str, modifier: str = "none") -> dict:
    return {
        "trait_bound": {
            "trait": {"path": path, "id": None, "args": None},
            "generic_params": [],
            "modifier": modifier,
        },
    }


def test_format_type_basic() -> None:
    """Verify primitives, generics, tuples, slices and arrays."""
    assert format_type({"primitive": "i32"}) == "i32"
    assert format_type({"generic": "T"}) == "T"
    assert format_type({"tuple": []}) == "()"
    assert format_type({"tuple": [{"primitive": "u8"}]}) == "(u8,)"
    assert format_type({"slice": {"primitive": "u8"}}) == "[u8]"
    assert format_type({"array": {"type": {"primitive": "u8"}, "len": "4"}}) == "[u8; 4]"
    assert format_type("infer") == "_"
    assert format_type(None) == "()"


def test_format_type_references() -> None:
    """Verify borrowed references and raw pointers."""
    ref = {"borrowed_ref": {"lifetime": "'a", "is_mutable": True, "type": {"primitive": "str"}}}
    assert format_type(ref) == "&'a mut str"
    ptr = {"raw_pointer": {"is_mutable": False, "type": {"primitive": "u8"}}}
    assert format_type(ptr) == "*const u8"


def test_format_type_paths_with_args() -> None:
    """Verify generic arguments and associated type constraints."""
    ty = {
        "resolved_path": {
            "path": "HashMap",
            "id": "7",
            "args": {
                "angle_bracketed": {
                    "args": [{"type": {"primitive": "u32"}}, {"lifetime": "'static"}],
                    "constraints": [],
                },
            },
        },
    }
    assert format_type(ty) == "HashMap<u32, 'static>"
    assert principal_path_id(ty) == "7"
    assert principal_path_id({"primitive": "u8"}) is None

    iterator = {
        "impl_trait": [
            {
                "trait_bound": {
                    "trait": {
                        "path": "Iterator",
                        "id": None,
                        "args": {
                            "angle_bracketed": {
                                "args": [],
                                "constraints": [
                                    {
                                        "name": "Item",
                                        "args": None,
                                        "binding": {"equality": {"type": {"primitive": "u8"}}},
                                    },
                                ],
                            },
                        },
                    },
                    "generic_params": [],
                    "modifier": "none",
                },
            },
        ],
    }
    assert format_type(iterator) == "impl Iterator<Item = u8>"


def test_format_type_dyn_and_fn_pointer() -> None:
    """Verify trait objects and function pointers."""
    dyn = {
        "dyn_trait": {
            "traits": [{"trait": {"path": "Fn", "id": None, "args": None}, "generic_params": []}],
            "lifetime": "'static",
        },
    }
    assert format_type(dyn) == "dyn Fn + 'static"
    fn_ptr = {
        "function_pointer": {
            "sig": {"inputs": [["_", {"primitive": "i32"}]], "output": {"primitive": "bool"}},
            "generic_params": [],
            "header": {"is_const": False, "is_unsafe": False, "is_async": False, "abi": "Rust"},
        },
    }
    assert format_type(fn_ptr) == "fn(i32) -> bool"


def test_format_qualified_path() -> None:
    """Verify `<T as Trait>::Name` projections."""
    ty = {
        "qualified_path": {
            "name": "Item",
            "args": None,
            "self_type": {"generic": "I"},
            "trait": {"path": "Iterator", "id": None, "args": None},
        },
    }
    assert format_type(ty) == "<I as Iterator>::Item"


def test_format_bounds_and_generics() -> None:
    """Verify bound lists, parameter lists and where clauses."""
    assert format_bounds([_trait_bound("Clone"), _trait_bound("Sized", "maybe")]) == "Clone + ?Sized"
    generics = {
        "params": [
            {"name": "'a", "kind": {"lifetime": {"outlives": []}}},
            {
                "name": "T",
                "kind": {"type": {"bounds": [_trait_bound("Clone")], "default": None}},
            },
            {"name": "impl Debug", "kind": {"type": {"bounds": [], "is_synthetic": True}}},
            {"name": "N", "kind": {"const": {"type": {"primitive": "usize"}, "default": None}}},
        ],
        "where_predicates": [
            {
                "bound_predicate": {
                    "type": {"generic": "T"},
                    "bounds": [_trait_bound("Send")],
                    "generic_params": [],
                },
            },
        ],
    }
    assert format_generics(generics) == "<'a, T: Clone, const N: usize>"
    assert format_where_clause(generics) == "\nwhere\n    T: Send,"
    assert format_where_clause({"params": [], "where_predicates": []}) == ""
