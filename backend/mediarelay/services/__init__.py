"""
MediaRelay Backend — Services Layer
=====================================

What:  The upload-to-remote-store pipeline, independent of HTTP.

Service Inventory:
    - ingest:         UploadFile → in-memory FileItem, bounded by the size limit
    - validator:      Ingress checks (count, declared type, size)
    - remote_store:   RemoteStore interface + Cloudinary implementation
    - uploader:       Streams one FileItem to the store → UploadOutcome
    - batch:          Concurrent, order-preserving fan-out of the uploader
    - asset_service:  Delete-by-identifier against the store
    - normalizer:     Outcomes → (status, JSON body)
"""
