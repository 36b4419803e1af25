from base import execute_endpoint

def seed(*breadcrumbs):
    rows = [
        {'product_id': f'category-{index}', 'product_title': 'Category test', 'category_tree': breadcrumb}
        for index, breadcrumb in enumerate(breadcrumbs)
    ]
    response = execute_endpoint('/add-product-batch', method='POST', body=rows, auth=True)
    assert response['statusCode'] == 200

def find(nodes, name):
    return next(node for node in nodes if node['name'] == name)

def test_browse_hierarchy():
    seed('Zebra Crafts > Sewing > Patterns', 'Zebra Crafts > Knitting', 'Zebra Crafts > Sewing > Fabric')

    roots = execute_endpoint('/category-hierarchy', auth=True, admin=False)
    assert roots['statusCode'] == 200
    root = find(roots['body'], 'Zebra Crafts')
    assert root['parent_id'] is None
    assert root['level'] == 0

    children = execute_endpoint(f"/category-hierarchy/{root['id']}", auth=True)['body']
    assert [node['name'] for node in children] == ['Knitting', 'Sewing']

    sewing = find(children, 'Sewing')
    leaves = execute_endpoint(f"/category-hierarchy?parent_id={sewing['id']}", auth=True)['body']
    assert [node['name'] for node in leaves] == ['Fabric', 'Patterns']
    assert all(node['level'] == 2 for node in leaves)

def test_reingest_does_not_duplicate_nodes():
    seed('Yak Goods > Wool')
    seed('Yak Goods > Wool')
    roots = execute_endpoint('/category-hierarchy', auth=True)['body']
    assert len([node for node in roots if node['name'] == 'Yak Goods']) == 1

def test_invalid_parent_id():
    response = execute_endpoint('/category-hierarchy/not-a-number', auth=True)
    assert response['statusCode'] == 400
    assert response['body']['comment'] == 'VALIDATION_FAILED'

def test_unknown_parent_has_no_children():
    response = execute_endpoint('/category-hierarchy/987654', auth=True)
    assert response['statusCode'] == 200
    assert response['body'] == []
