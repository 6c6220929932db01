from django.urls import path
try:
    from . import views
except ImportError:
    from browse_app import views


app_name = 'browse_app'

urlpatterns = [
    path("", views.repo_list, name="repo_list"),
    path("<str:name>/", views.repo_overview, name="repo_overview"),
    path(
        "<str:name>/tree/<str:ref>/",
        views.tree_view,
        name="tree_root",
    ),
    path(
        "<str:name>/tree/<str:ref>/<path:path>/",
        views.tree_view,
        name="tree_view",
    ),
    path(
        "<str:name>/refs/<str:ref>/",
        views.refs_view,
        name="refs_root",
    ),
    path(
        "<str:name>/refs/<str:ref>/<path:path>/",
        views.refs_view,
        name="refs_view",
    ),
]
