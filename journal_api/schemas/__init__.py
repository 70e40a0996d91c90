"""
Journal API: Pydantic Request/Response Schemas
==============================================

Request models validate bodies before any storage access; response models
pin the exact JSON field names of the wire contract (camelCase timestamps,
`count`/`user`/`entries` index shape, `code`/`msg`/`details` errors).
"""
