from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from authstarter.auth.google import GoogleTokenVerifier, get_google_verifier
from authstarter.db import get_db
from authstarter.mail.dispatcher import EmailDispatcher
from authstarter.mail.factory import get_email_dispatcher

DBSession = Annotated[Session, Depends(get_db)]
Mailer = Annotated[EmailDispatcher, Depends(get_email_dispatcher)]
GoogleVerifier = Annotated[GoogleTokenVerifier, Depends(get_google_verifier)]
