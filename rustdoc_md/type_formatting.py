"""Reconstruct Rust source text from rustdoc's structured type references."""

from typing import Any


def lifetime(name: str) -> str:
    """Return a lifetime with exactly one leading apostrophe."""
    return name if name.startswith("'") else f"'{name}"


def path_name(path: dict[str, Any]) -> str:
    """Return the written path of a rustdoc Path (`path` in newer exports, `name` before)."""
    return str(path.get("path") or path.get("name") or "?")


def format_path(path: dict[str, Any]) -> str:
    """Format a path with its generic arguments, e.g. `Vec<T>`."""
    return path_name(path) + format_generic_args(path.get("args"))


def format_type(ty: Any) -> str:
    """Format a rustdoc Type as Rust source text."""
    if ty is None:
        return "()"
    if isinstance(ty, str):
        return "_" if ty == "infer" else ty
    if not isinstance(ty, dict) or len(ty) != 1:
        return "/* unknown type */"

    tag, val = next(iter(ty.items()))
    if tag == "resolved_path":
        return format_path(val)
    if tag in {"primitive", "generic"}:
        return str(val)
    if tag == "tuple":
        return "(" + ", ".join(format_type(t) for t in val) + ("," if len(val) == 1 else "") + ")"
    if tag == "slice":
        return f"[{format_type(val)}]"
    if tag == "array":
        return f"[{format_type(val.get('type'))}; {val.get('len')}]"
    if tag == "borrowed_ref":
        out = "&"
        if val.get("lifetime"):
            out += lifetime(val["lifetime"]) + " "
        if val.get("is_mutable"):
            out += "mut "
        return out + format_type(val.get("type"))
    if tag == "raw_pointer":
        mut = "*mut " if val.get("is_mutable") else "*const "
        return mut + format_type(val.get("type"))
    if tag == "dyn_trait":
        return _format_dyn_trait(val)
    if tag == "impl_trait":
        return "impl " + format_bounds(val)
    if tag == "function_pointer":
        return _format_fn_pointer(val)
    if tag == "qualified_path":
        return _format_qualified_path(val)
    if tag == "pat":
        return f"{format_type(val.get('type'))} is {val.get('__pat_unstable_do_not_use', '_')}"
    return f"/* {tag} */"


def principal_path_id(ty: Any) -> str | None:
    """Return the id of the outermost path of a type, if it is a plain path."""
    if isinstance(ty, dict) and "resolved_path" in ty:
        rid = ty["resolved_path"].get("id")
        return str(rid) if rid is not None else None
    return None


def format_generic_args(args: Any) -> str:
    """Format generic arguments: `<T, Item = U>` or `(A, B) -> C`."""
    if not args:
        return ""
    if args == "return_type_notation":
        return "(..)"
    if "angle_bracketed" in args:
        ab = args["angle_bracketed"]
        parts = [_format_generic_arg(a) for a in ab.get("args") or []]
        constraints = ab.get("constraints") or ab.get("bindings") or []
        parts.extend(_format_constraint(c) for c in constraints)
        return f"<{', '.join(parts)}>" if parts else ""
    if "parenthesized" in args:
        par = args["parenthesized"]
        out = "(" + ", ".join(format_type(t) for t in par.get("inputs") or []) + ")"
        if par.get("output") is not None:
            out += " -> " + format_type(par["output"])
        return out
    return ""


def _format_generic_arg(arg: Any) -> str:
    if arg == "infer":
        return "_"
    if "lifetime" in arg:
        return lifetime(arg["lifetime"])
    if "type" in arg:
        return format_type(arg["type"])
    if "const" in arg:
        return format_constant(arg["const"])
    return "_"


def _format_constraint(constraint: dict[str, Any]) -> str:
    out = str(constraint.get("name", "?")) + format_generic_args(constraint.get("args"))
    binding = constraint.get("binding") or {}
    if "equality" in binding:
        return f"{out} = {format_term(binding['equality'])}"
    if "constraint" in binding:
        return f"{out}: {format_bounds(binding['constraint'])}"
    return out


def format_term(term: dict[str, Any]) -> str:
    """Format the right-hand side of an equality constraint."""
    if "type" in term:
        return format_type(term["type"])
    if "constant" in term:
        return format_constant(term["constant"])
    return "_"


def format_constant(const: Any) -> str:
    """Format a constant expression."""
    if isinstance(const, dict):
        return str(const.get("expr") or const.get("value") or "_")
    return str(const)


def format_bounds(bounds: list[Any]) -> str:
    """Format a `+`-separated bound list, e.g. `Clone + Send + 'static`."""
    return " + ".join(_format_bound(b) for b in bounds or [])


def _format_bound(bound: Any) -> str:
    if "trait_bound" in bound:
        tb = bound["trait_bound"]
        modifier = {"maybe": "?", "maybe_const": "~const "}.get(tb.get("modifier"), "")
        return modifier + _format_hrtb(tb.get("generic_params")) + format_path(tb["trait"])
    if "outlives" in bound:
        return lifetime(bound["outlives"])
    if "use" in bound:
        return "use<" + ", ".join(_format_capture(a) for a in bound["use"]) + ">"
    return "?"


def _format_capture(arg: Any) -> str:
    if isinstance(arg, str):
        return arg
    if "lifetime" in arg:
        return lifetime(arg["lifetime"])
    return str(arg.get("param", "?"))


def _format_hrtb(params: list[dict[str, Any]] | None) -> str:
    """Format a higher-ranked `for<'a> ` prefix."""
    if not params:
        return ""
    names = [
        lifetime(p["name"]) if "lifetime" in (p.get("kind") or {}) else str(p["name"])
        for p in params
    ]
    return f"for<{', '.join(names)}> "


def format_generics(generics: dict[str, Any] | None) -> str:
    """Format a generic parameter list, e.g. `<'a, T: Clone, const N: usize>`."""
    params = []
    for param in (generics or {}).get("params") or []:
        kind = param.get("kind") or {}
        name = str(param.get("name", "?"))
        if "lifetime" in kind:
            text = lifetime(name)
            outlives = kind["lifetime"].get("outlives") or []
            if outlives:
                text += ": " + " + ".join(lifetime(o) for o in outlives)
        elif "type" in kind:
            tk = kind["type"]
            # Synthetic params stand for `impl Trait` arguments and are shown there.
            if tk.get("is_synthetic"):
                continue
            text = name
            if tk.get("bounds"):
                text += ": " + format_bounds(tk["bounds"])
            if tk.get("default") is not None:
                text += " = " + format_type(tk["default"])
        elif "const" in kind:
            ck = kind["const"]
            text = f"const {name}: {format_type(ck.get('type'))}"
            if ck.get("default") is not None:
                text += f" = {ck['default']}"
        else:
            text = name
        params.append(text)
    return f"<{', '.join(params)}>" if params else ""


def format_where_clause(generics: dict[str, Any] | None) -> str:
    """Format a where clause on its own lines, or return an empty string."""
    predicates = (generics or {}).get("where_predicates") or []
    if not predicates:
        return ""
    lines = [f"    {_format_predicate(p)}," for p in predicates]
    return "\nwhere\n" + "\n".join(lines)


def _format_predicate(pred: dict[str, Any]) -> str:
    if "bound_predicate" in pred:
        bp = pred["bound_predicate"]
        text = _format_hrtb(bp.get("generic_params")) + format_type(bp.get("type"))
        if bp.get("bounds"):
            text += ": " + format_bounds(bp["bounds"])
        return text
    if "lifetime_predicate" in pred:
        lp = pred["lifetime_predicate"]
        text = lifetime(lp["lifetime"])
        if lp.get("outlives"):
            text += ": " + " + ".join(lifetime(o) for o in lp["outlives"])
        return text
    if "eq_predicate" in pred:
        ep = pred["eq_predicate"]
        return f"{format_type(ep.get('lhs'))} = {format_term(ep.get('rhs') or {})}"
    return "/* unknown predicate */"


def format_abi(abi: Any) -> str:
    """Format a non-Rust ABI as an `extern "..." ` prefix."""
    if abi in (None, "Rust"):
        return ""
    if isinstance(abi, str):
        return f'extern "{abi}" '
    name, val = next(iter(abi.items()))
    if name == "Other":
        return f'extern "{val}" '
    unwind = isinstance(val, dict) and val.get("unwind")
    abi_name = "C" if name == "C" else name.lower()
    return f'extern "{abi_name}{"-unwind" if unwind else ""}" '


def format_fn_header(header: dict[str, Any] | None) -> str:
    """Format function qualifiers in source order: const, async, unsafe, extern."""
    header = header or {}
    out = ""
    if header.get("is_const"):
        out += "const "
    if header.get("is_async"):
        out += "async "
    if header.get("is_unsafe"):
        out += "unsafe "
    return out + format_abi(header.get("abi"))


def format_fn_inputs(sig: dict[str, Any], *, with_names: bool = True) -> str:
    """Format a parameter list, including a trailing C variadic."""
    params = []
    for name, ty in sig.get("inputs") or []:
        params.append(f"{name}: {format_type(ty)}" if with_names else format_type(ty))
    if sig.get("is_c_variadic"):
        params.append("...")
    return "(" + ", ".join(params) + ")"


def format_fn_output(sig: dict[str, Any]) -> str:
    """Format the ` -> T` return part; unit returns are omitted."""
    output = sig.get("output")
    if output is None or output == {"tuple": []}:
        return ""
    return " -> " + format_type(output)


def _format_dyn_trait(val: dict[str, Any]) -> str:
    traits = [
        _format_hrtb(pt.get("generic_params")) + format_path(pt["trait"])
        for pt in val.get("traits") or []
    ]
    out = "dyn " + " + ".join(traits)
    if val.get("lifetime"):
        out += " + " + lifetime(val["lifetime"])
    return out


def _format_fn_pointer(val: dict[str, Any]) -> str:
    sig = val.get("sig") or val.get("decl") or {}
    return (
        _format_hrtb(val.get("generic_params"))
        + format_fn_header(val.get("header"))
        + "fn"
        + format_fn_inputs(sig, with_names=False)
        + format_fn_output(sig)
    )


def _format_qualified_path(val: dict[str, Any]) -> str:
    self_type = format_type(val.get("self_type"))
    trait = val.get("trait")
    if trait:
        head = f"<{self_type} as {format_path(trait)}>"
    else:
        head = self_type
    return f"{head}::{val.get('name', '?')}{format_generic_args(val.get('args'))}"
