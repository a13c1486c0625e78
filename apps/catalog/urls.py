from django.urls import path
from . import views

app_name = 'catalog'

urlpatterns = [
    # Uploads
    path('upload/', views.media_upload, name='media_upload'),

    # Scheduled jobs
    path('cron/sync-market/', views.cron_sync_market, name='cron_sync_market'),
    path('cron/update-prices/', views.cron_update_prices, name='cron_update_prices'),
]
