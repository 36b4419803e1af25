from routes import routes
import yaml
import lambda_function # Registers every route module

api_description = """
openapi: 3.0.3
info:
  title: Marketplace Listings Dashboard API
  description: |-
    Backend for the marketplace listings dashboard.

    Admins ingest product, store and category snapshots as JSON batches or CSV uploads. Analysts page, filter, sort and export the stored rows, browse the category hierarchy and chart how a field changed over time.
  license:
    name: MIT
    url: https://opensource.org/license/mit
  version: 1.0.0
components:
  securitySchemes:
    bearerAuth:
      type: http
      scheme: bearer
      bearerFormat: JWT
security:
  - bearerAuth: []
"""

default_body = """
responses:
    200:
        description: OK
    400:
        description: Bad Request
"""

def indent(text, level=1, spaces=2, newline=True):
    lines = text.split("\n")
    lines = [f"{' ' * spaces * level}{line}" for line in lines]
    return "\n".join(lines) + ("\n" if newline else "")

def format_docstring(docstring):
    """Format the docstring to be YAML-compliant (consistent spacing, etc.)"""
    yaml_doc = yaml.load(docstring, Loader=yaml.FullLoader)
    return yaml.dump(yaml_doc, sort_keys=False)

def generate_routes_docs():
    """
    Generate documentation for all routes by parsing the docstrings of each route and returning a Swagger-compliant YAML string.
    """
    docs = "paths:\n"
    for path in routes.keys():
        formatted_path = path if path.startswith("/") else f"/{path}"
        docs += indent(f"{formatted_path}:", 1)
        for method in routes[path].keys():
            docs += indent(f'{method.lower()}:', 2)

            current_method_doc = ""
            raw_doc = routes[path][method].__doc__ or ""
            parts = raw_doc.split("---")
            head = parts[0].strip().split("\n")
            summary = head[0]
            if len(summary) > 0:
                current_method_doc = indent("summary: " + summary, 3)

            if len(head) > 1:
                description = "|-\n" + indent("\n".join([line.strip() for line in head[1:]]).strip(), 1, newline=False)
                current_method_doc += indent(format_docstring("description: " + description), 3)

            body = parts[1] if len(parts) > 1 else default_body
            body = format_docstring(body)
            current_method_doc += indent(body.strip(), 3)

            docs += current_method_doc
    return docs

def main(output="swagger.yaml"):
    routes_docs = generate_routes_docs()
    api_docs = format_docstring(api_description)
    with open(output, "w") as f:
        f.write(api_docs + routes_docs)

if __name__ == "__main__":
    main()
