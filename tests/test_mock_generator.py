# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import pytest

from cppumockgen_mock_generator import CppUMockGenMockGenerator


def mock_body(call):
    return f"{{\n    {call};\n}}\n"


@pytest.mark.parametrize('source, expected', [
    ('void function1(int a);',
     'void function1(int a)\n' + mock_body('mock().actualCall("function1").withIntParameter("a", a)')),
    ('int f(void);',
     'int f()\n' + mock_body('return mock().actualCall("f").returnIntValue()')),
    ('const char * f(const char * s);',
     'const char * f(const char * s)\n'
     + mock_body('return mock().actualCall("f").withStringParameter("s", s).returnStringValue()')),
    ('void f(unsigned int u, long l, unsigned long ul, double d);',
     'void f(unsigned int u, long l, unsigned long ul, double d)\n'
     + mock_body('mock().actualCall("f").withUnsignedIntParameter("u", u).withLongIntParameter("l", l)'
                 '.withUnsignedLongIntParameter("ul", ul).withDoubleParameter("d", d)')),
    ('short f(short a);',
     'short f(short a)\n'
     + mock_body('return static_cast<short>(mock().actualCall("f").withIntParameter("a", a).returnIntValue())')),
    ('void f(int, int);',
     'void f(int _unnamedArg0, int _unnamedArg1)\n'
     + mock_body('mock().actualCall("f").withIntParameter("_unnamedArg0", _unnamedArg0)'
                 '.withIntParameter("_unnamedArg1", _unnamedArg1)')),
])
def test_simple_c_functions(mock_of, source, expected):
    assert mock_of(source) == expected


@pytest.mark.parametrize('param, call', [
    ('int * p', '.withOutputParameter("p", p)'),
    ('const int * p', '.withConstPointerParameter("p", p)'),
    ('void * p', '.withPointerParameter("p", p)'),
    ('const void * p', '.withConstPointerParameter("p", p)'),
    ('int ** pp', '.withPointerParameter("pp", pp)'),
    ('const char ** names', '.withPointerParameter("names", names)'),
])
def test_pointer_parameters(mock_of, param, call):
    assert f'mock().actualCall("f"){call};' in mock_of(f'void f({param});')


def test_enum(mock_of):
    mock = mock_of('enum E { A, B };\nenum E f(enum E e);')
    assert mock == ('enum E f(enum E e)\n'
                    + mock_body('return static_cast<enum E>(mock().actualCall("f")'
                                '.withIntParameter("e", static_cast<int>(e)).returnIntValue())'))


@pytest.mark.parametrize('param, call', [
    ('struct S s', '.withParameterOfType("S", "s", &s)'),
    ('const struct S * s', '.withParameterOfType("S", "s", s)'),
    ('struct S * s', '.withOutputParameterOfType("S", "s", s)'),
])
def test_struct_parameters(mock_of, param, call):
    assert f'mock().actualCall("f"){call};' in mock_of(f'struct S {{ int x; }};\nvoid f({param});')


class TestCppRecords:

    def test_method(self, mock_of):
        assert mock_of('class C { public: void m(); };', cpp=True) == (
            'void C::m()\n' + mock_body('mock().actualCall("C::m").onObject(this)'))

    def test_const_method(self, mock_of):
        assert mock_of('class C { public: int get(int a) const; };', cpp=True) == (
            'int C::get(int a) const\n'
            + mock_body('return mock().actualCall("C::get").onObject(this).withIntParameter("a", a).returnIntValue()'))

    def test_constructor(self, mock_of):
        assert mock_of('class C { public: C(int a); };', cpp=True) == (
            'C::C(int a)\n' + mock_body('mock().actualCall("C::C").withIntParameter("a", a)'))

    def test_destructor(self, mock_of):
        mock = mock_of('class C { public: ~C(); };', cpp=True)
        assert mock.startswith('C::~C()')
        assert mock.endswith(mock_body('mock().actualCall("C::~C").onObject(this)'))

    def test_namespace(self, mock_of):
        assert mock_of('namespace ns { int f(double d); }', cpp=True) == (
            'int ns::f(double d)\n'
            + mock_body('return mock().actualCall("ns::f").withDoubleParameter("d", d).returnIntValue()'))

    def test_noexcept(self, mock_of):
        assert mock_of('void f() noexcept;', cpp=True).startswith('void f() noexcept\n')

    @pytest.mark.parametrize('param, call', [
        ('int & r', '.withOutputParameter("r", &r)'),
        ('const int & r', '.withConstPointerParameter("r", &r)'),
        ('int *& r', '.withPointerParameter("r", &r)'),
    ])
    def test_reference_parameters(self, mock_of, param, call):
        assert f'mock().actualCall("f"){call};' in mock_of(f'void f({param});', cpp=True)

    def test_class_return(self, mock_of):
        assert mock_of('struct S { int x; };\nS f();', cpp=True) == (
            'S f()\n' + mock_body('return *static_cast<const S*>(mock().actualCall("f").returnConstPointerValue())'))


class TestOverrides:

    def test_string_from_class(self, parse):
        parser = parse('namespace std { class string { public: const char * c_str() const; }; }\n'
                       'void f(const std::string & s);',
                       cpp=True, overrides=['#const std::string &=String~$.c_str()'])
        mock = CppUMockGenMockGenerator().generate(parser.functions[-1])
        assert mock == ('void f(const std::string & s)\n'
                        + mock_body('mock().actualCall("f").withStringParameter("s", s.c_str())'))

    def test_memory_buffer(self, mock_of):
        mock = mock_of('void f(unsigned char * buf, int buf_size);', overrides=['#buf=MemoryBuffer:~$_size'])
        assert '.withMemoryBufferParameter("buf", buf, buf_size)' in mock

    def test_memory_buffer_cast(self, mock_of):
        mock = mock_of('void f(void * buf, int len);', overrides=['f#buf=MemoryBuffer:len'])
        assert ('.withMemoryBufferParameter("buf", static_cast<const unsigned char *>'
                '(static_cast<const void *>(buf)), len)') in mock

    def test_skip(self, mock_of):
        assert mock_of('void f(int a, int b);', overrides=['f#b=Skip']) == (
            'void f(int a, int)\n' + mock_body('mock().actualCall("f").withIntParameter("a", a)'))

    def test_function_override_wins(self, mock_of):
        mock = mock_of('void f(int a);', overrides=['#a=Double', 'f#a=LongInt'])
        assert '.withLongIntParameter("a", a)' in mock

    def test_return_override(self, mock_of):
        assert mock_of('int f(void);', overrides=['f@=Double~static_cast<int>($)']) == (
            'int f()\n' + mock_body('return static_cast<int>(mock().actualCall("f").returnDoubleValue())'))

    def test_output_return_override(self, mock_of):
        assert mock_of('int * f(void);', overrides=['f@=Output']) == (
            'int * f()\n' + mock_body('return mock().actualCall("f").returnPointerValue()'))

        mock = mock_of('int * f(void);', cpp=True, overrides=['f@=Output~static_cast<int *>($)'])
        assert mock.endswith(mock_body('return static_cast<int *>(mock().actualCall("f").returnPointerValue())'))

    def test_input_of_type(self, mock_of):
        mock = mock_of('struct S { int x; };\nvoid f(const struct S * s);', overrides=['#s=InputOfType:Data'])
        assert '.withParameterOfType("Data", "s", s)' in mock

    def test_function_pointer(self, mock_of):
        assert mock_of('void f(void (*cb)(int));', overrides=['#cb=Pointer~(void*)$']) == (
            'void f(void (*cb)(int))\n' + mock_body('mock().actualCall("f").withPointerParameter("cb", (void*)cb)'))


class TestMockability:

    def names(self, parse, source, **kwargs):
        return [function.qualified_name for function in parse(source, **kwargs).functions]

    def test_inline_and_repeated_declarations(self, parse):
        source = 'void a(void);\nvoid a(void);\nstatic inline int b(void) { return 0; }\nvoid c(void);'
        assert self.names(parse, source) == ['a', 'c']

    def test_variadic(self, parse):
        assert self.names(parse, 'int log_it(const char * fmt, ...);\nvoid g(void);') == ['g']

    def test_class_members(self, parse):
        source = """
class C {
public:
    C(const C & other) = delete;
    bool operator==(const C & other) const;
    virtual void pure() = 0;
    void inline_method() {}
    void pub();
protected:
    C();
    void prot();
    virtual void prot_virtual();
private:
    ~C();
    void priv();
    virtual void priv_virtual();
    class Hidden { public: void h(); };
};
"""
        assert self.names(parse, source, cpp=True) == ['C::pub', 'C::C', 'C::prot_virtual', 'C::~C',
                                                        'C::priv_virtual']

    def test_method_defined_outside_class(self, parse):
        source = 'class C { public: void m(); void n(); };\nvoid C::m() {}\ninline int g() { return 1; }'
        assert self.names(parse, source, cpp=True) == ['C::n']

    def test_templates(self, parse):
        source = ('template<typename T> class TC { public: void m(); };\n'
                  'template<typename T> void tf(T t);\nvoid g();')
        assert self.names(parse, source, cpp=True) == ['g']

    def test_unsupported_type(self, parse):
        _, errors = parse('void f(void (*cb)(int));', expect_success=False)
        assert errors == "INPUT ERROR: Unsupported type 'void (*)(int)'\n"


@pytest.mark.parametrize('underlying_typedef, type_name', [
    (False, 'S_t'),
    (True, 'S_tag'),
])
def test_underlying_typedef(mock_of, underlying_typedef, type_name):
    mock = mock_of('typedef struct S_tag { int x; } S_t;\nvoid f(const S_t * p);', underlying_typedef=underlying_typedef)
    assert f'.withParameterOfType("{type_name}", "p", p);' in mock
