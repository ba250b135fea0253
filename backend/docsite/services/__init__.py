# Services package init
"""
Docsite Backend - Services Layer
=================================

What:  Site logic that sits between the middleware/routes and the loaded
       content. Nothing in here knows about HTTP except the query-parameter
       type the learning-track resolver reads.

Service Inventory:
    - path_utils:      language/version/canonical path handling
    - renderer:        template rendering and the fallback combinator
    - content_store:   pages by canonical path and language
    - data_directory:  YAML data sets by language
    - link_data:       raw link → localized href + title
    - learning_tracks: learning-track resolution for a request
    - site:            bundle of the above, built once at startup
"""
