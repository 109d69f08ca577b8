"""
Contact Registration URL Configuration

The submission handler is built here and handed to the view explicitly.
"""
from django.urls import path
from .services import build_submission_handler
from .views import ContactDataView

app_name = 'contact'

urlpatterns = [
    path('data', ContactDataView.as_view(handler=build_submission_handler()), name='data'),
]
