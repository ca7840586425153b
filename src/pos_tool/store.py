"""Store identity."""


class Store:
    """The shop the registers belong to."""

    version = "0.1"

    def hello_world(self) -> str:
        return "Hello world"
