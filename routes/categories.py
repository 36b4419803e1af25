from middlewares.authenticate import authenticate
from routes import route
from utils import Response, use
from utils.category_tree import children_of

def list_children(parent_id, response: Response):
    if parent_id is not None:
        try:
            parent_id = int(parent_id)
        except ValueError:
            return response.status(400).json({
                "success": False,
                "comment": "VALIDATION_FAILED",
                "error": "parent_id must be an integer"
            })
    return [node.model_dump() for node in children_of(parent_id)]

@route('category-hierarchy', 'GET')
@use(authenticate)
def get_root_categories(event, response: Response):
    """List the root categories

    Root nodes of the category hierarchy, ordered by name. Pass `parent_id` in the query string to list the children of a node instead.
    ---
    tags:
        - categories
    parameters:
        - in: query
          name: parent_id
          required: false
          schema:
            type: integer
    responses:
        200:
            description: Category nodes
            content:
                application/json:
                    schema:
                        type: array
                        items:
                            type: object
                            properties:
                                id:
                                    type: integer
                                name:
                                    type: string
                                parent_id:
                                    type: integer
                                    nullable: true
                                level:
                                    type: integer
    """
    query = event.get('queryStringParameters') or {}
    return list_children(query.get('parent_id') or None, response)

@route('category-hierarchy/{parent_id}', 'GET')
@use(authenticate)
def get_child_categories(event, response: Response):
    """List the children of a category

    Immediate children of `parent_id`, ordered by name.
    ---
    tags:
        - categories
    parameters:
        - in: path
          name: parent_id
          required: true
          schema:
            type: integer
    responses:
        200:
            description: Category nodes
            content:
                application/json:
                    schema:
                        type: array
                        items:
                            type: object
        400:
            description: parent_id is not an integer
    """
    return list_children(event['pathParameters']['parent_id'], response)
