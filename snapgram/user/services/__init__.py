from .core import (
    get_user_by_account_id as _get_user_by_account_id,
    get_user_by_id as _get_user_by_id,
    get_users as _get_users,
    is_username_taken as _is_username_taken,
    save_user_to_db as _save_user_to_db,
    update_user as _update_user,
)
from .social_graph import (
    follow_user as _follow_user,
    get_followers as _get_followers,
    get_followers_count as _get_followers_count,
    get_following as _get_following,
    get_following_count as _get_following_count,
    is_following as _is_following,
    unfollow_user as _unfollow_user,
)


class UserService:
    """Service class for user profiles and the social graph."""

    get_user_by_id = staticmethod(_get_user_by_id)
    get_user_by_account_id = staticmethod(_get_user_by_account_id)
    get_users = staticmethod(_get_users)
    is_username_taken = staticmethod(_is_username_taken)
    save_user_to_db = staticmethod(_save_user_to_db)
    update_user = staticmethod(_update_user)
    follow_user = staticmethod(_follow_user)
    unfollow_user = staticmethod(_unfollow_user)
    is_following = staticmethod(_is_following)
    get_followers_count = staticmethod(_get_followers_count)
    get_following_count = staticmethod(_get_following_count)
    get_followers = staticmethod(_get_followers)
    get_following = staticmethod(_get_following)
