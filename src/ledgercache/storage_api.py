class StorageAPI(object):
    """
    Contract for how code talks to storage.

    Values live in named buckets of byte-key -> byte-value pairs. All reads
    and writes happen inside a transaction obtained from view() (read-only)
    or update() (read-write); both are context managers yielding an object
    implementing TransactionAPI.
    """

    def view(self):
        raise NotImplementedError()

    def update(self):
        raise NotImplementedError()

    def close(self):
        raise NotImplementedError()


class TransactionAPI(object):
    """Operations available inside one atomic storage transaction."""

    def get(self, bucket, key):
        """Return the value for key, or None if the bucket or key is absent."""
        raise NotImplementedError()

    def put(self, bucket, key, value):
        """Store value under key, creating the bucket if needed."""
        raise NotImplementedError()

    def cursor(self, bucket):
        """Iterate (key, value) pairs of a bucket in ascending key byte order."""
        raise NotImplementedError()

    def keys(self, bucket):
        raise NotImplementedError()
