from linkpulse.dao.base.link_base_dao import LinkBaseDAO
from linkpulse.dao.base.user_base_dao import UserBaseDAO


__all__ = [
    'LinkBaseDAO',
    'UserBaseDAO',
]
