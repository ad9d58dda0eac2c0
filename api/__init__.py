"""HTTP and WebSocket binding for the blackjack table."""
