import pytest

from gotenberg.context import Context, ModuleLoadError
from gotenberg.flags import ParsedFlags
from gotenberg.modules import ModuleDescriptor, Provisioner, Validator


class _ProvisionerModule:
    def __init__(self, error=None):
        self.error = error
        self.provisioned = 0
        self.ctx = None

    def descriptor(self):
        return ModuleDescriptor(id="foo", new=lambda: self)

    def provision(self, ctx):
        self.provisioned += 1
        self.ctx = ctx
        if self.error is not None:
            raise self.error


class _ValidatorModule:
    def __init__(self, error=None):
        self.error = error

    def descriptor(self):
        return ModuleDescriptor(id="foo", new=lambda: self)

    def validate(self):
        if self.error is not None:
            raise self.error


def test_module_error_on_provision():
    mod = _ProvisionerModule(RuntimeError("foo"))
    ctx = Context(ParsedFlags(), [mod.descriptor()])
    with pytest.raises(ModuleLoadError, match="provision module foo: foo"):
        ctx.module(Provisioner)


def test_module_two_instead_of_one():
    mod = _ProvisionerModule()
    ctx = Context(ParsedFlags(), [mod.descriptor(), mod.descriptor()])
    with pytest.raises(ModuleLoadError, match="one and only one"):
        ctx.module(Provisioner)


def test_module_success():
    mod = _ProvisionerModule()
    ctx = Context(ParsedFlags(), [mod.descriptor()])
    assert ctx.module(Provisioner) is mod
    assert mod.ctx is ctx


def test_modules_error_on_provision():
    mod = _ProvisionerModule(RuntimeError("foo"))
    ctx = Context(ParsedFlags(), [mod.descriptor()])
    with pytest.raises(ModuleLoadError):
        ctx.modules(Provisioner)


def test_modules_success_cached():
    mod = _ProvisionerModule()
    ctx = Context(ParsedFlags(), [mod.descriptor(), mod.descriptor()])
    assert ctx.modules(Provisioner) == [mod, mod]
    assert mod.provisioned == 1
    assert ctx.modules(Provisioner) == [mod, mod]
    assert mod.provisioned == 1


def test_modules_success_one():
    mod = _ProvisionerModule()
    ctx = Context(ParsedFlags(), [mod.descriptor()])
    assert ctx.modules(Provisioner) == [mod]


def test_modules_kind_not_matching():
    mod = _ProvisionerModule()
    ctx = Context(ParsedFlags(), [mod.descriptor()])
    assert ctx.modules(Validator) == []
    assert mod.provisioned == 0
    assert ctx.module_instances() == {}


def test_load_error_on_validation():
    mod = _ValidatorModule(ValueError("foo"))
    ctx = Context(ParsedFlags(), [mod.descriptor()])
    with pytest.raises(ModuleLoadError, match="validate module foo: foo"):
        ctx.modules(Validator)
    assert ctx.module_instances() == {}


def test_load_validation_success():
    mod = _ValidatorModule()
    ctx = Context(ParsedFlags(), [mod.descriptor()])
    assert ctx.modules(Validator) == [mod]
    assert ctx.module_instances() == {"foo": mod}


def test_parsed_flags():
    flags = ParsedFlags()
    ctx = Context(flags, None)
    assert ctx.parsed_flags() is flags