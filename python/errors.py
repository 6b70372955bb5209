class InvalidInput(ValueError):
    pass


class DeviceFailure(RuntimeError):
    """A fatal backend failure: pool start, dispatch, barrier or worker crash.

    Arguments are kept in ``args`` so the exception survives pickling
    when it is raised inside a pool process.
    """

    def __init__(self, operation, detail):
        super().__init__(operation, str(detail))
        self.operation = operation
        self.detail = str(detail)

    def __str__(self):
        return f"{self.operation} failed: {self.detail}"
