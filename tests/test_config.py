# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import pytest

from cppumockgen_config import CppUMockGenConfig, CppUMockGenOverrideMap, MockedType, OptionError


def single_spec(option):
    key = option.partition('=')[0].strip(' ')
    return CppUMockGenOverrideMap([option]).get(key)


class TestOverrideSpec:

    @pytest.mark.parametrize('option, mocked_type', [
        ('#a=Int', MockedType.INT),
        ('f#a=UnsignedLongInt', MockedType.UNSIGNED_LONG),
        ('#a=Skip', MockedType.SKIP),
        ('#a=OutputPOD', MockedType.OUTPUT_POD),
        ('f@=ConstPointer', MockedType.CONST_POINTER),
        ('f@=Output', MockedType.OUTPUT),
        ('@const char *=String', MockedType.STRING),
    ])
    def test_simple_types(self, option, mocked_type):
        spec = single_spec(option)
        assert spec.type is mocked_type
        assert not spec.has_expr_mod

    def test_expression_modifier(self):
        spec = single_spec('#s = String ~ $.c_str()')
        assert spec.type is MockedType.STRING
        assert spec.update_arg_expr('s') == ' s.c_str()'

    def test_of_type_names(self):
        spec = single_spec('#p=InputOfType:Foo<Bar')
        assert spec.type is MockedType.INPUT_OF_TYPE
        assert spec.exposed_type_name == 'Foo'
        assert spec.expectation_arg_type_name == 'Bar'

        spec = single_spec('#p=OutputOfType:Foo')
        assert spec.type is MockedType.OUTPUT_OF_TYPE
        assert spec.expectation_arg_type_name == 'Foo'

    def test_memory_buffer_size(self):
        spec = single_spec('#buf=MemoryBuffer:$_len')
        assert spec.type is MockedType.MEMORY_BUFFER
        assert spec.get_size_expr('buf') == 'buf_len'

        spec = single_spec('#buf=MemoryBuffer:16')
        assert spec.get_size_expr('buf') == '16'

    def test_memory_buffer_size_as_modifier(self):
        spec = single_spec('#buf=MemoryBuffer:~$_size')
        assert not spec.has_expr_mod
        assert spec.update_arg_expr('buf') == 'buf'
        assert spec.get_size_expr('buf') == 'buf_size'


class TestOverrideErrors:

    @pytest.mark.parametrize('option, message', [
        ('=', 'Override option key cannot be empty <=>.'),
        ('#a', 'Invalid override option <#a>.'),
        ('a=Int', 'Invalid override option key format <a=Int>.'),
        ('f#a#b=Int', 'Invalid override option key format <f#a#b=Int>.'),
        ('f@g=Int', 'Invalid override option key format <f@g=Int>.'),
        ('#a=', 'Override option spec cannot be empty <#a=>'),
        ('#a=~$', 'Override option type cannot be empty <#a=~$>'),
        ('#a=Int~', 'Override option argument expression cannot be empty if specified <#a=Int~>'),
        ('#a=Int~x', 'Override option argument expression does not contain parameter name placeholder ($) <#a=Int~x>'),
        ('#a=Int~$+$', 'Override option argument expression contains more than one parameter name placeholder ($) '
                       '<#a=Int~$+$>'),
        ('#a=Float', 'Invalid override option type <#a=Float>.'),
        ('f@=Skip', 'Invalid override option type <f@=Skip>.'),
        ('#a=Skip~$', 'Override option argument expression cannot be used with Skip type <#a=Skip~$>'),
        ('#a=InputOfType:', 'Override option exposed type cannot be empty <#a=InputOfType:>'),
        ('#a=InputOfType:Foo<', 'Override option expectation argument type cannot be empty <#a=InputOfType:Foo<>'),
        ('#a=MemoryBuffer:', 'Override option memory buffer size expression cannot be empty <#a=MemoryBuffer:>'),
    ])
    def test_message(self, option, message):
        with pytest.raises(OptionError) as e:
            CppUMockGenOverrideMap([option])
        assert str(e.value) == message

    def test_duplicate_key(self):
        with pytest.raises(OptionError, match='can only be passed once'):
            CppUMockGenOverrideMap(['#a=Int', ' #a = Double'])


class TestConfig:

    def test_parameter_lookup_order(self):
        config = CppUMockGenConfig(override_options=['f#a=Int', '#a=Double', '#int=Bool'])
        assert config.get_parameter_override('f', 'a', 'int').type is MockedType.INT
        assert config.get_parameter_override('g', 'a', 'int').type is MockedType.DOUBLE
        assert config.get_parameter_override('g', 'b', 'int').type is MockedType.BOOL
        assert config.get_parameter_override('g', 'b', 'long') is None

    def test_return_lookup_order(self):
        config = CppUMockGenConfig(override_options=['f@=Int', '@long=LongInt'])
        assert config.get_return_override('f', 'long').type is MockedType.INT
        assert config.get_return_override('g', 'long').type is MockedType.LONG
        assert config.get_return_override('g', 'int') is None

    def test_defaults(self):
        config = CppUMockGenConfig()
        assert not config.use_underlying_typedef
        assert len(config.overrides) == 0
