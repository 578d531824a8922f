from rest_framework.pagination import PageNumberPagination


class ListingPagination(PageNumberPagination):
    """Page-number pagination for listings."""
    page_size = 12                      # default items per page
    page_size_query_param = 'page_size' # allow ?page_size=
    max_page_size = 48                  # safety cap
