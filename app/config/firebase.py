"""
Firebase initialization.
Single-source-of-truth Firebase app for JANTA: Firestore client and
Storage bucket used by every service.
"""

import json
import os
import logging
from typing import Optional
import firebase_admin
from firebase_admin import credentials, firestore, storage, initialize_app

from app.core.settings import settings

logger = logging.getLogger(__name__)

db: Optional[firestore.Client] = None
bucket = None


def _validate_credentials_file(cred_path: str) -> None:
    if not os.path.exists(cred_path):
        raise FileNotFoundError(
            f"Firebase credentials file not found: {cred_path}\n"
            f"Please check your .env file and ensure FIREBASE_CREDENTIALS_PATH is correct.\n"
            f"Current working directory: {os.getcwd()}"
        )

    try:
        with open(cred_path, 'r') as f:
            cred_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(
            f"Firebase credentials file is not valid JSON: {e}\n"
            f"Please check the file at: {cred_path}"
        )

    required_fields = ['type', 'project_id', 'private_key', 'client_email']
    missing_fields = [field for field in required_fields if field not in cred_data]
    if missing_fields:
        raise ValueError(
            f"Firebase credentials file is missing required fields: {missing_fields}\n"
            f"Please download a fresh service account key from Firebase Console."
        )

    logger.info(f"[FIREBASE] Credentials file validated: {cred_path}")
    logger.info(f"[FIREBASE] Project ID: {cred_data.get('project_id', 'N/A')}")


def initialize_firebase() -> firebase_admin.App:
    """
    Initialize the Firebase Admin app once.
    Uses the service account file when configured, otherwise Application
    Default Credentials.
    """
    if firebase_admin._apps:
        return firebase_admin.get_app()

    options = {}
    if settings.FIREBASE_STORAGE_BUCKET:
        options["storageBucket"] = settings.FIREBASE_STORAGE_BUCKET
    if settings.FIREBASE_PROJECT_ID:
        options["projectId"] = settings.FIREBASE_PROJECT_ID

    try:
        if settings.FIREBASE_CREDENTIALS_PATH:
            _validate_credentials_file(settings.FIREBASE_CREDENTIALS_PATH)
            cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)
            app = initialize_app(cred, options or None)
            logger.info("[FIREBASE] Admin SDK initialized with service account")
        else:
            logger.info("[FIREBASE] No credentials path set, using Application Default Credentials")
            app = initialize_app(options=options or None)
        return app

    except FileNotFoundError as e:
        raise RuntimeError(
            f"Firebase initialization FAILED - Credentials file not found.\n"
            f"{str(e)}\n"
            f"SOLUTION: Check your .env file and ensure FIREBASE_CREDENTIALS_PATH points to a valid service account JSON file."
        )
    except ValueError as e:
        raise RuntimeError(
            f"Firebase initialization FAILED - Invalid credentials file.\n"
            f"{str(e)}\n"
            f"SOLUTION: Download a fresh service account key from Firebase Console:\n"
            f"1. Go to Firebase Console > Project Settings > Service Accounts\n"
            f"2. Click 'Generate New Private Key'\n"
            f"3. Save the JSON file and update FIREBASE_CREDENTIALS_PATH in .env"
        )


def initialize_firestore() -> firestore.Client:
    global db

    if db is not None:
        return db

    initialize_firebase()
    try:
        db = firestore.client()
    except Exception as e:
        raise RuntimeError(
            f"Firestore initialization FAILED. Error: {str(e)}\n"
            f"Please check your Firebase credentials and configuration."
        )

    logger.info(f"[FIRESTORE] Connected. Project: {settings.FIREBASE_PROJECT_ID or 'default'}")
    return db


def get_db() -> firestore.Client:
    """
    Get the initialized Firestore client.

    Raises RuntimeError if Firestore has not been initialized.
    """
    if db is None:
        try:
            initialize_firestore()
        except Exception as e:
            raise RuntimeError(
                f"Firestore not initialized and initialization failed: {e}. "
                "Please check your Firebase credentials and configuration."
            )
    return db


def get_bucket():
    """
    Get the Storage bucket holding report images.

    Raises RuntimeError if no bucket is configured.
    """
    global bucket

    if bucket is None:
        if not settings.FIREBASE_STORAGE_BUCKET:
            raise RuntimeError("FIREBASE_STORAGE_BUCKET is not configured; image uploads are unavailable")
        initialize_firebase()
        bucket = storage.bucket()
    return bucket
