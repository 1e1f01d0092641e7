from psdlite.registry import new_registry


def test_register() -> None:
    types, register = new_registry()

    @register(1, 2)
    class First:
        pass

    assert types == {1: First, 2: First}


def test_register_override() -> None:
    types, register = new_registry()
    register("a")(int)
    register("a")(str)
    assert types["a"] is str
