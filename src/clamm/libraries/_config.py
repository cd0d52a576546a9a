LIB_CACHE_SIZE = 4096
