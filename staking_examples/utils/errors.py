class StakingError(Exception):
    pass


class MissingEnvironmentError(StakingError):
    def __init__(self, names):
        self.names = list(names)
        super().__init__(
            "Required environment variable(s) not set: " + ", ".join(self.names)
        )


class AddressNotFoundError(StakingError):
    pass


class SigningError(StakingError):
    pass


class BlockdaemonApiError(StakingError):
    def __init__(self, status_code: int, body):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Blockdaemon API error ({status_code}): {body}")


class InsufficientFundsError(StakingError):
    pass


class ValidatorNotFoundError(StakingError):
    pass
