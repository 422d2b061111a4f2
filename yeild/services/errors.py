"""Domain errors raised by the reward services."""


class YeildError(Exception):
    """Base class for reward domain errors."""


class TierConfigurationError(YeildError):
    """The tier table is empty, unordered or has no zero floor tier."""


class ProfileNotFoundError(YeildError):
    def __init__(self, user_id: int):
        super().__init__(f"Profile {user_id} not found")
        self.user_id = user_id


class ReferralError(YeildError):
    """A referral signup was rejected."""
