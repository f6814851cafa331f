from minigrad.engine import Value


def _is_list_of(value, cls):
    return isinstance(value, (list, tuple)) and len(value) > 0 and all(isinstance(v, cls) for v in value)


class Module:
    def __init__(self):
        # store child modules and parameters, in assignment order
        self._modules = {}
        self._parameters = {}

    def __setattr__(self, name, value):
        # auto-register Values (single or listed) as parameters
        if isinstance(value, Value) or _is_list_of(value, Value):
            self._parameters[name] = value
        # auto-register submodules (single or listed)
        elif isinstance(value, Module) or _is_list_of(value, Module):
            self._modules[name] = value
        super().__setattr__(name, value)

    def named_parameters(self, prefix=''):
        # yield this module's params…
        for name, param in self._parameters.items():
            full_name = f"{prefix}.{name}" if prefix else name
            if isinstance(param, Value):
                yield full_name, param
            else:
                for i, p in enumerate(param):
                    yield f"{full_name}.{i}", p
        # …and all child modules' params
        for name, module in self._modules.items():
            new_prefix = f"{prefix}.{name}" if prefix else name
            if isinstance(module, Module):
                yield from module.named_parameters(new_prefix)
            else:
                for i, m in enumerate(module):
                    yield from m.named_parameters(f"{new_prefix}.{i}")

    def parameters(self):
        for _, p in self.named_parameters():
            yield p

    def zero_grad(self):
        for p in self.parameters():
            p.zero_grad()
