from .object_id import parse_object_id
from .query import page_offset, text_search_clause
from .map_to_dict import map_user_to_public_dict, map_friend_request_to_public_dict
