from meetups.models.file import File
from meetups.models.user import User
from meetups.models.meetup import Meetup
from meetups.models.subscription import Subscription

__all__ = ["File", "User", "Meetup", "Subscription"]
