import json
import logging

import firebase_admin
from firebase_admin import credentials

from broker_backend.core.config import Settings

logger = logging.getLogger(__name__)


def get_firebase_app(settings: Settings) -> firebase_admin.App:
    """Return the default Firebase app, initializing it on first use.

    Credentials are taken, in order, from FIREBASE_SERVICE_ACCOUNT_JSON (the
    maintenance scripts), GOOGLE_APPLICATION_CREDENTIALS (local development)
    and finally the ambient application default credentials.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        logger.info("Initializing Firebase app...")

    if settings.FIREBASE_SERVICE_ACCOUNT_JSON:
        try:
            service_account = json.loads(settings.FIREBASE_SERVICE_ACCOUNT_JSON.get_secret_value())
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_JSON is not valid JSON") from e
        cred = credentials.Certificate(service_account)
    elif settings.GOOGLE_APPLICATION_CREDENTIALS:
        cred = credentials.Certificate(settings.GOOGLE_APPLICATION_CREDENTIALS)
    else:
        # For environments like Google Cloud Run where service account is implicit
        cred = credentials.ApplicationDefault()

    options = {"projectId": settings.GOOGLE_CLOUD_PROJECT} if settings.GOOGLE_CLOUD_PROJECT else None
    app = firebase_admin.initialize_app(cred, options)
    logger.info("Firebase app initialized successfully.")
    return app
