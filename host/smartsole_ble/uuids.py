# Nordic UART Service, must match the insole firmware

UART_SERVICE = "6e400001-b5a3-f393-e0a9-e50e24dcca9e"
UART_RX_CHAR = "6e400002-b5a3-f393-e0a9-e50e24dcca9e"  # Write/Write Without Resp
UART_TX_CHAR = "6e400003-b5a3-f393-e0a9-e50e24dcca9e"  # Notify
