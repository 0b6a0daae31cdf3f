# app/model_registry/__init__.py


# Register all models here

# User models
from app.users.user_models.user_model import User
from app.users.auth_session_model.session_model import Session

# System models
from app.system_models.patient_model.patient_model import Patient
from app.system_models.clinical_note_model.clinical_note_model import PatientNote
