"""
GraphQL documents sent to the Saleor backend.

Every operation the server performs is declared here as a fixed document.
Checkout mutations request the payload ``errors`` list alongside the result
so a rejected mutation can be told apart from one that returned nothing.

Purchase flow (in order):
  GET_STORE_OFFER            offer page with its attributes
  CREATE_CHECKOUT            new checkout with a single line at the offer price
  UPDATE_CHECKOUT_METADATA   offerId / offerName provenance on the checkout
  UPDATE_DELIVERY            pick the delivery (shipping) method
  COMPLETE_CHECKOUT          turn the checkout into an order

Catalog reads:
  GET_STORE_PAGE_TYPE, GET_STORE_PAGES, GET_STORE_PAGE, GET_STORE_OFFERS, GET_VARIANT
"""

PAGE_ATTRIBUTES_FRAGMENT = """
fragment PageAttributes on SelectedAttribute {
  attribute {
    slug
  }
  values {
    name
    reference
  }
}
"""

GET_STORE_OFFER = """
query GetStoreOffer($id: ID!) {
  page(id: $id) {
    id
    title
    content
    attributes {
      ...PageAttributes
    }
  }
}
""" + PAGE_ATTRIBUTES_FRAGMENT

CREATE_CHECKOUT = """
mutation CreateExampleCheckout($input: CheckoutCreateInput!) {
  checkoutCreate(input: $input) {
    checkout {
      id
      shippingMethods {
        id
        name
      }
    }
    errors {
      field
      message
      code
    }
  }
}
"""

UPDATE_CHECKOUT_METADATA = """
mutation UpdateCheckoutMetadata($id: ID!, $metadata: [MetadataInput!]!) {
  updateMetadata(id: $id, input: $metadata) {
    item {
      ... on Checkout {
        id
      }
    }
    errors {
      field
      message
      code
    }
  }
}
"""

UPDATE_DELIVERY = """
mutation UpdateDelivery($id: ID!, $methodId: ID!) {
  checkoutDeliveryMethodUpdate(id: $id, deliveryMethodId: $methodId) {
    checkout {
      id
    }
    errors {
      field
      message
      code
    }
  }
}
"""

COMPLETE_CHECKOUT = """
mutation CompleteCheckout($id: ID!) {
  checkoutComplete(id: $id) {
    order {
      id
    }
    errors {
      field
      message
      code
    }
  }
}
"""

GET_STORE_PAGE_TYPE = """
query GetStorePageType($name: String!) {
  pageTypes(first: 1, filter: {search: $name}) {
    edges {
      node {
        id
        name
      }
    }
  }
}
"""

GET_STORE_PAGES = """
query GetStorePages($pageTypeId: ID!) {
  pages(first: 100, filter: {pageTypes: [$pageTypeId]}) {
    edges {
      node {
        id
        title
        slug
      }
    }
  }
}
"""

GET_STORE_PAGE = """
query GetStorePage($id: ID!) {
  page(id: $id) {
    id
    title
    slug
    attributes {
      ...PageAttributes
    }
  }
}
""" + PAGE_ATTRIBUTES_FRAGMENT

GET_STORE_OFFERS = """
query GetStoreOffers($ids: [ID!]!) {
  pages(first: 100, filter: {ids: $ids}) {
    edges {
      node {
        id
        title
        slug
        content
        attributes {
          ...PageAttributes
        }
      }
    }
  }
}
""" + PAGE_ATTRIBUTES_FRAGMENT

GET_VARIANT = """
query GetVariant($id: ID!, $channel: String!) {
  productVariant(id: $id, channel: $channel) {
    id
    name
    pricing {
      price {
        gross {
          amount
          currency
        }
      }
    }
  }
}
"""

MUTATIONS = frozenset(
    {"CreateExampleCheckout", "UpdateCheckoutMetadata", "UpdateDelivery", "CompleteCheckout"}
)
