"""
MediaRelay Backend — API Routes Package
=========================================

Route Inventory:
    - health.py:  GET    /api/health               (liveness probe)
    - upload.py:  POST   /api/upload               (single image, field "image")
                  POST   /api/uploads              (batch, field "images" / "images[]")
    - assets.py:  DELETE /api/delete/{public_id}   (remove a stored asset)

Routes stay thin: read the multipart parts, call the services, hand the
outcome to the normalizer.
"""
