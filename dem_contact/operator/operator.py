# Base class for all operators

class Operator:
    """
    Base class for all operators. Operators hold their parameters and
    act on particle data when called.
    """

    def __call__(self, *args, **kwargs):
        """
        Apply the operator to its inputs.
        """
        raise NotImplementedError(
            f"{type(self).__name__} does not implement __call__"
        )
