from django.urls import path

from . import views

app_name = "explorer"

urlpatterns = [
    path("", views.index, name="index"),
    path("api/graph/load/", views.load_graph_api, name="graph-load-api"),
    path("api/graph/load-catalog/", views.load_catalog_api, name="graph-load-catalog-api"),
    path("api/graph/<str:graph_id>/analysis/", views.graph_analysis_api, name="graph-analysis-api"),
    path("api/graph/neighbors/", views.graph_neighbors_api, name="graph-neighbors-api"),
    path("api/render/", views.render_visualizer_api, name="render-visualizer-api"),
]
