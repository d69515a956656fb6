"""researchdesk: template-driven research projects stored as markdown.

Layout under the configured root:
    .templates/
    └── blog.yaml                      # Template: categories, entry types, statuses
    .researches/
    └── my-research/
        ├── research.yaml              # Research metadata
        └── posts/
            └── article/
                └── first-post.md      # Entry: YAML frontmatter + markdown body
"""

__version__ = "0.1.0"
