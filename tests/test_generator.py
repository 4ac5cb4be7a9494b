"""Tests for the complete generated interface and the command line tool."""

import json
import random

import pytest

import gen_cpp
from cpp_bindgen import (
    CodeGen, EnumGenerator, EnumInfo, EnumItem, GenConfig, Generator, IR, generate,
)

from test_methods import dedent


def test_stream_layout(ir, config):
    out = generate(ir, config)
    assert out.startswith(
        '\nnamespace isl {\n\n'
        '// forward declarations\n'
        'class ast_node;\nclass ast_node_for;\nclass set;\nclass union_set;\n\n'
        '// enums\n'
        'enum class dim_type {\n')
    assert out.endswith('} // namespace isl\n')
    assert 'noexceptions' not in out
    # declarations of all classes come before any implementation
    assert out.index('// declarations for isl::union_set') < out.index('// implementations for isl::ast_node')


def test_stream_without_exceptions(ir, noexc_config):
    out = generate(ir, noexc_config)
    assert out.startswith('\nnamespace isl {\n\ninline namespace noexceptions {\n\n// forward declarations\n')
    assert out.endswith('} // namespace noexceptions\n} // namespace isl\n')
    assert 'throw' not in out
    assert 'options_scoped_set_on_error' not in out
    assert 'eptr' not in out


def test_stream_without_extensions(ir):
    out = generate(ir, GenConfig(extensions=False))
    assert '// enums' not in out
    assert 'enum class' not in out
    assert 'to_str' not in out


def test_deterministic(table, config):
    expected = generate(IR.from_dict(table), config)
    rng = random.Random(7)
    for _ in range(3):
        rng.shuffle(table['classes'])
        for clazz in table['classes']:
            methods = list(clazz.get('methods', {}).items())
            rng.shuffle(methods)
            clazz['methods'] = dict(methods)
        assert generate(IR.from_dict(table), config) == expected


def test_enum_emission(ir, config):
    gen = CodeGen()
    EnumGenerator(config).generate(ir.enums['isl_dim_type'], gen)
    assert gen.output() == dedent('''
        enum class dim_type {
          cst = isl_dim_cst,
          param = isl_dim_param,
          in = isl_dim_in,
          out = isl_dim_out,
          set = isl_dim_set,
          div = isl_dim_div,
          all = isl_dim_all,
        };
        ''')


@pytest.mark.parametrize(
    'enum_name,item,expected',
    [
        ('isl_ast_op_type', 'isl_ast_op_and', 'and_'),
        ('isl_ast_op_type', 'isl_ast_op_min', 'min'),
        ('isl_fmt', 'isl_fmt_2d', '_2d'),
        ('isl_error', 'isl_error_none', 'none'),
    ],
)
def test_enum_item_names(config, enum_name, item, expected):
    enum = EnumInfo(enum_name, (EnumItem(item),))
    assert EnumGenerator(config).item_name(enum, item) == expected


def test_generator_configuration(ir):
    gen = Generator(exceptions=False, namespace='polly')
    gen.ignore('isl_set_union')
    gen.rename('intersect', 'meet')
    config = gen.config(ir)
    assert config.namespace == 'polly'
    assert config.prefix == 'isl_'
    assert not config.exceptions
    assert 'isl_set_union' in config.ignores
    assert config.rename('intersect') == 'meet'
    assert config.rename('union') == 'unite'
    out = gen.generate(ir)
    assert 'namespace polly {' in out
    assert ' meet(' in out


def test_cli(tmp_path, table, capsys):
    input_path = tmp_path / 'isl.json'
    input_path.write_text(json.dumps(table))
    output_path = tmp_path / 'include' / 'isl-noexceptions.h'

    assert gen_cpp.main([str(input_path), '-o', str(output_path), '--noexceptions']) == 0
    code = output_path.read_text()
    assert 'inline namespace noexceptions {' in code
    assert not (tmp_path / 'include' / 'isl-noexceptions.h.tmp').exists()
    assert '=== Generating C++ bindings:' in capsys.readouterr().err


def test_cli_stdout(tmp_path, table, capsys):
    input_path = tmp_path / 'isl.json'
    input_path.write_text(json.dumps(table))
    assert gen_cpp.main([str(input_path), '--no-extensions']) == 0
    out = capsys.readouterr().out
    assert out.startswith('\nnamespace isl {\n')
    assert 'enum class' not in out


def test_cli_error(tmp_path, table, capsys):
    table['classes'][1]['methods']['dim'][0]['params'][0]['ownership'] = 'borrow'
    input_path = tmp_path / 'isl.json'
    input_path.write_text(json.dumps(table))
    output_path = tmp_path / 'isl.h'

    assert gen_cpp.main([str(input_path), '-o', str(output_path)]) == 1
    assert 'error: ' in capsys.readouterr().err
    assert not output_path.exists()


def test_cli_missing_input(tmp_path, capsys):
    assert gen_cpp.main([str(tmp_path / 'missing.json')]) == 1
    assert 'error: ' in capsys.readouterr().err


def test_configuration_is_immutable(ir):
    gen = Generator()
    config = gen.config(ir)
    with pytest.raises(TypeError):
        config.renames['intersect'] = 'meet'
    gen.rename('intersect', 'meet')
    assert config.rename('intersect') == 'intersect'
