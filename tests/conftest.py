"""Pytest configuration for the C++ binding generator tests."""

import copy
import sys
from pathlib import Path

import pytest

SCRIPTS_DIR = Path(__file__).parent.parent / "scripts"
sys.path.insert(0, str(SCRIPTS_DIR))

from cpp_bindgen import IR, GenConfig, CodeGen  # noqa: E402
from cpp_bindgen.generator import _class_generator  # noqa: E402


def func(name, type_, *params, gives=False):
    """Build a function entry of the class table."""
    return {
        "name": name,
        "type": type_,
        "gives": gives,
        "params": [{"name": n, "type": t} for n, t in params],
    }


BASIC_SET_CALLBACK = "isl_stat (*)(__isl_take isl_basic_set *, void *)"
BASIC_SET_TEST = "isl_bool (*)(__isl_keep isl_basic_set *, void *)"

TABLE = {
    "prefix": "isl_",
    "namespace": "isl",
    "enums": [
        {
            "name": "isl_dim_type",
            "items": [
                {"name": "isl_dim_cst", "value": 0},
                {"name": "isl_dim_param", "value": 1},
                {"name": "isl_dim_in", "value": 2},
                {"name": "isl_dim_out", "value": 3},
                {"name": "isl_dim_set", "value": 3},
                {"name": "isl_dim_div", "value": 4},
                {"name": "isl_dim_all", "value": 5},
            ],
        },
    ],
    "classes": [
        {
            "name": "isl_union_set",
            "constructors": [
                func("isl_union_set_from_set", "isl_union_set *(isl_set *)",
                     ("set", "__isl_take isl_set *"), gives=True),
            ],
            "to_str_fn": func("isl_union_set_to_str", "char *(isl_union_set *)",
                              ("uset", "__isl_keep isl_union_set *")),
        },
        {
            "name": "isl_set",
            "superclasses": ["isl_union_set"],
            "to_str_fn": func("isl_set_to_str", "char *(isl_set *)",
                              ("set", "__isl_keep isl_set *")),
            "is_equal_fn": func("isl_set_is_equal", "isl_bool (isl_set *, isl_set *)",
                                ("set1", "__isl_keep isl_set *"),
                                ("set2", "__isl_keep isl_set *")),
            "constructors": [
                func("isl_set_read_from_str", "isl_set *(isl_ctx *, const char *)",
                     ("ctx", "isl_ctx *"), ("str", "const char *"), gives=True),
            ],
            "methods": {
                "intersect": [
                    func("isl_set_intersect", "isl_set *(isl_set *, isl_set *)",
                         ("set1", "__isl_take isl_set *"),
                         ("set2", "__isl_take isl_set *"), gives=True),
                ],
                "union": [
                    func("isl_set_union", "isl_set *(isl_set *, isl_set *)",
                         ("set1", "__isl_take isl_set *"),
                         ("set2", "__isl_take isl_set *"), gives=True),
                ],
                "is_subset": [
                    func("isl_set_is_subset", "isl_bool (isl_set *, isl_set *)",
                         ("set1", "__isl_keep isl_set *"),
                         ("set2", "__isl_keep isl_set *")),
                ],
                "dim": [
                    func("isl_set_dim", "int (isl_set *, enum isl_dim_type)",
                         ("set", "__isl_keep isl_set *"),
                         ("type", "enum isl_dim_type")),
                ],
                "foreach_basic_set": [
                    func("isl_set_foreach_basic_set",
                         f"isl_stat (isl_set *, {BASIC_SET_CALLBACK}, void *)",
                         ("set", "__isl_keep isl_set *"),
                         ("fn", BASIC_SET_CALLBACK),
                         ("user", "void *")),
                ],
                "count_matching": [
                    func("isl_set_count_matching",
                         f"int (isl_set *, {BASIC_SET_TEST}, void *)",
                         ("set", "__isl_keep isl_set *"),
                         ("test", BASIC_SET_TEST),
                         ("user", "void *")),
                ],
                "empty": [
                    func("isl_set_empty", "isl_set *(isl_space *)",
                         ("space", "__isl_take isl_space *"), gives=True),
                ],
            },
        },
        {
            "name": "isl_ast_node",
            "type_fn": func("isl_ast_node_get_type",
                            "enum isl_ast_node_type (isl_ast_node *)",
                            ("node", "__isl_keep isl_ast_node *")),
            "to_str_fn": func("isl_ast_node_to_str", "char *(isl_ast_node *)",
                              ("node", "__isl_keep isl_ast_node *")),
        },
        {
            "name": "isl_ast_node",
            "subclass_name": "isl_ast_node_for",
            "methods": {
                "get_body": [
                    func("isl_ast_node_for_get_body", "isl_ast_node *(isl_ast_node *)",
                         ("node", "__isl_keep isl_ast_node *"), gives=True),
                ],
            },
        },
    ],
}


@pytest.fixture
def table():
    """A small isl-like class table, safe to modify."""
    return copy.deepcopy(TABLE)


@pytest.fixture
def ir(table):
    return IR.from_dict(table)


@pytest.fixture
def config():
    return GenConfig()


@pytest.fixture
def noexc_config():
    return GenConfig(exceptions=False)


@pytest.fixture
def emit(ir, config):
    """Return a function generating (declaration, implementation) of a class."""

    def _emit(subclass_name, cfg=None, table_ir=None):
        cfg = cfg or config
        table_ir = table_ir or ir
        class_gen = _class_generator(table_ir, cfg)
        clazz = table_ir.classes[subclass_name]
        decl = CodeGen()
        class_gen.generate_decl(clazz, decl)
        impl = CodeGen()
        class_gen.generate_impl(clazz, impl)
        return decl.output(), impl.output()

    return _emit
