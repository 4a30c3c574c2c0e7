# store/exceptions.py

class StoreError(Exception):
    pass


class StoreUnavailable(StoreError):
    pass


class StoreTimeout(StoreError):
    pass
