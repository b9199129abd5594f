"""
CV Intake Backend - REST API for validated document uploads

This package provides a FastAPI-based web service that accepts a single
document per request and turns it into a stored, signed PDF reference:

- Field, file type and size validation
- Malware scanning through clamdscan (fail-closed)
- Conversion of word-processor formats to PDF through LibreOffice
- Storage in an S3-compatible bucket with public-read visibility
- HMAC integrity tokens binding submitter, path and URL

Key Components:
    - main: FastAPI application and HTTP endpoint definitions
    - pipeline: Sequencing of the upload stages and scratch file lifecycle
    - validator: Allow-list and size policy checks
    - scanner / converter: Adapters around the external tools
    - s3_service: Object storage uploads
    - token_issuer: Integrity token generation and verification
    - configuration: Config loading from config.yaml and the environment

Usage:
    Run the API server with:
        uvicorn cv_intake_backend.main:app --host 0.0.0.0 --port 8080
"""
