# uploads/storage.py
"""S3 object storage: presigned browser uploads and server-side puts."""
import logging
import posixpath

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings

from campus.errors import TransientBackendError, ValidationError

logger = logging.getLogger(__name__)

MAX_KEY_LENGTH = 1024


def get_s3_client():
    return boto3.client(
        "s3",
        region_name=settings.AWS_REGION,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
    )


def public_url(file_path):
    return f"https://{settings.AWS_S3_BUCKET}.s3.{settings.AWS_REGION}.amazonaws.com/{file_path}"


def validate_upload(file_path, content_type, file_size=None):
    if not file_path or not content_type:
        raise ValidationError("Missing filePath or contentType")
    if len(file_path) > MAX_KEY_LENGTH or file_path.startswith('/') or '\\' in file_path:
        raise ValidationError("Invalid filePath")
    if '..' in file_path.split('/') or posixpath.normpath(file_path) != file_path:
        raise ValidationError("Invalid filePath")
    if content_type not in settings.ALLOWED_UPLOAD_CONTENT_TYPES:
        raise ValidationError(f"Unsupported content type: {content_type}")
    if file_size is not None and (file_size <= 0 or file_size > settings.MAX_UPLOAD_BYTES):
        raise ValidationError(f"File must be between 1 byte and {settings.MAX_UPLOAD_BYTES} bytes")


def create_presigned_upload(file_path, content_type, file_size=None, client=None):
    """Short-lived URL the caller PUTs the file bytes to directly."""
    validate_upload(file_path, content_type, file_size)
    client = client or get_s3_client()
    expires = settings.PRESIGNED_URL_EXPIRES_SECONDS
    try:
        upload_url = client.generate_presigned_url(
            "put_object",
            Params={
                "Bucket": settings.AWS_S3_BUCKET,
                "Key": file_path,
                "ContentType": content_type,
            },
            ExpiresIn=expires,
        )
    except (ClientError, BotoCoreError) as e:
        raise TransientBackendError(f"Failed to generate presigned URL: {str(e)}")
    logger.info(f"Issued presigned upload for {file_path} ({content_type})")
    return {
        "uploadURL": upload_url,
        "expiresInSeconds": expires,
        "bucket": settings.AWS_S3_BUCKET,
        "filePath": file_path,
        "publicURL": public_url(file_path),
    }


def upload_file(file_path, data, content_type, client=None):
    validate_upload(file_path, content_type, len(data))
    client = client or get_s3_client()
    try:
        client.put_object(
            Bucket=settings.AWS_S3_BUCKET,
            Key=file_path,
            Body=data,
            ContentType=content_type,
        )
    except (ClientError, BotoCoreError) as e:
        raise TransientBackendError(f"Upload failed: {str(e)}")
    logger.info(f"Uploaded {len(data)} bytes to {file_path}")
    return public_url(file_path)


def configure_cors(origins, methods, headers, max_age=3600, client=None):
    client = client or get_s3_client()
    rules = {
        "CORSRules": [
            {
                "AllowedOrigins": list(origins),
                "AllowedMethods": [method.upper() for method in methods],
                "AllowedHeaders": list(headers),
                "ExposeHeaders": ["ETag"],
                "MaxAgeSeconds": max_age,
            }
        ]
    }
    try:
        client.put_bucket_cors(Bucket=settings.AWS_S3_BUCKET, CORSConfiguration=rules)
    except (ClientError, BotoCoreError) as e:
        raise TransientBackendError(f"Failed to set CORS: {str(e)}")
    return rules
