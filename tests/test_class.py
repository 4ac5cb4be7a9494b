"""Tests for the generation of complete wrapper classes."""

from cpp_bindgen import GenConfig

from test_methods import dedent


def test_declaration(emit):
    decl, _ = emit('isl_union_set')
    assert decl == dedent('''
        // declarations for isl::union_set
        inline isl::union_set manage(__isl_take isl_union_set *ptr);
        inline isl::union_set manage_copy(__isl_keep isl_union_set *ptr);

        class union_set {
          friend inline isl::union_set manage(__isl_take isl_union_set *ptr);
          friend inline isl::union_set manage_copy(__isl_keep isl_union_set *ptr);

        protected:
          isl_union_set *ptr = nullptr;

          inline explicit union_set(__isl_take isl_union_set *ptr);

        public:
          inline /* implicit */ union_set();
          inline /* implicit */ union_set(const isl::union_set &obj);
          inline /* implicit */ union_set(isl::set set);
          inline isl::union_set &operator=(isl::union_set obj);
          inline ~union_set();
          inline __isl_give isl_union_set *copy() const &;
          inline __isl_give isl_union_set *copy() && = delete;
          inline __isl_keep isl_union_set *get() const;
          inline __isl_give isl_union_set *release();
          inline bool is_null() const;
          inline explicit operator bool() const;
          inline isl::ctx get_ctx() const;
          inline std::string to_str() const;

          typedef isl_union_set* isl_ptr_t;
        };
        ''')


def test_factories(emit):
    _, impl = emit('isl_set')
    assert dedent('''
        isl::set manage(__isl_take isl_set *ptr) {
          if (!ptr)
            throw isl::exception::create(isl_error_invalid,
                "NULL input", __FILE__, __LINE__);
          return set(ptr);
        }
        isl::set manage_copy(__isl_keep isl_set *ptr) {
          if (!ptr)
            throw isl::exception::create(isl_error_invalid,
                "NULL input", __FILE__, __LINE__);
          auto ctx = isl_set_get_ctx(ptr);
          ptr = isl_set_copy(ptr);
          if (!ptr)
            throw exception::create_from_last_error(ctx);
          return set(ptr);
        }
        ''') in impl


def test_value_semantics(emit):
    _, impl = emit('isl_set')
    assert dedent('''
        set::set(const isl::set &obj)
            : ptr(obj.copy())
        {
          if (obj.ptr && !ptr)
            throw exception::create_from_last_error(isl_set_get_ctx(obj.ptr));
        }
        ''') in impl
    assert dedent('''
        set &set::operator=(isl::set obj) {
          std::swap(this->ptr, obj.ptr);
          return *this;
        }
        ''') in impl
    assert dedent('''
        set::~set() {
          if (ptr)
            isl_set_free(ptr);
        }
        ''') in impl
    assert dedent('''
        __isl_give isl_set *set::release() {
          isl_set *tmp = ptr;
          ptr = nullptr;
          return tmp;
        }
        ''') in impl


def test_printing_and_comparison(emit):
    _, impl = emit('isl_set')
    assert 'inline std::ostream& operator<<(std::ostream& os, const set& C) {\n' in impl
    assert 'inline bool operator==(const set& C1, const set& C2) {\n  return C1.is_equal(C2);\n}\n' in impl
    assert '  char *Tmp = isl_set_to_str(get());\n' in impl


def test_without_extensions(emit):
    decl, impl = emit('isl_set', GenConfig(extensions=False))
    assert 'to_str' not in decl
    assert 'operator<<' not in impl
    assert 'operator==' not in impl
    assert 'inline int dim(enum isl_dim_type type) const;' in decl


def test_methods_in_name_order(emit):
    decl, _ = emit('isl_set')
    names = ['count_matching', 'dim', 'empty', 'foreach_basic_set', 'intersect', 'is_subset', 'unite']
    positions = [decl.index(f' {name}(') for name in names]
    assert positions == sorted(positions)


def test_ignored_functions(emit):
    decl, impl = emit('isl_set', GenConfig(ignores=frozenset({'isl_set_union', 'isl_set_read_from_str'})))
    assert 'unite' not in decl
    assert 'isl_set_union' not in impl
    assert 'isl_set_read_from_str' not in impl


def test_superclass_downcasts(emit):
    decl, impl = emit('isl_ast_node')
    assert '  template <class T> inline bool isa();\n' in decl
    assert '  template <class T> inline T as();\n' in decl
    assert dedent('''
        template <class T>
        bool ast_node::isa()
        {
          if (is_null())
            throw isl::exception::create(isl_error_invalid,
                "NULL input", __FILE__, __LINE__);
          return isl_ast_node_get_type(get()) == T::type;
        }
        template <class T>
        T ast_node::as()
        {
          return isa<T>() ? T(copy()) : T();
        }
        ''') in impl


def test_downcasts_without_exceptions(emit, noexc_config):
    decl, impl = emit('isl_ast_node', noexc_config)
    assert 'template <class T> inline isl::boolean isa();' in decl
    assert '  if (is_null())\n    return isl::boolean();\n' in impl
    assert '  if (is_null())\n    return T();\n' in impl


def test_subclass_view(emit):
    decl, impl = emit('isl_ast_node_for')
    assert dedent('''
        // declarations for isl::ast_node_for

        class ast_node_for : public ast_node {
          friend bool ast_node::isa<ast_node_for>();
          friend ast_node_for ast_node::as<ast_node_for>();
          static const auto type = isl_ast_node_for;

        protected:
          inline explicit ast_node_for(__isl_take isl_ast_node *ptr);

        public:
          inline /* implicit */ ast_node_for();
          inline /* implicit */ ast_node_for(const isl::ast_node_for &obj);
          inline isl::ast_node_for &operator=(isl::ast_node_for obj);
          inline isl::ctx get_ctx() const;
        ''') in decl
    # the C object belongs to the superclass
    assert 'manage' not in decl
    assert '~ast_node_for' not in decl
    assert 'isl_ast_node *ptr = nullptr;' not in decl
    assert dedent('''
        ast_node_for::ast_node_for()
            : ast_node() {}

        ast_node_for::ast_node_for(const isl::ast_node_for &obj)
            : ast_node(obj)
        {
        }

        ast_node_for::ast_node_for(__isl_take isl_ast_node *ptr)
            : ast_node(ptr) {}
        ''') in impl
    assert 'isl_ast_node_free' not in impl
